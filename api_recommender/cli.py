"""
Command line entry point - interactive REPL or HTTP server
"""

import argparse
import asyncio
import sys
from typing import Optional

import aiosqlite
from loguru import logger

from api_recommender.agents.assistant import AssistantAgent
from api_recommender.catalog import parse_api_docs
from api_recommender.config.settings import settings, resolve_path
from api_recommender.llm.client import describe_provider
from api_recommender.memory.history_store import HistoryStore
from api_recommender.utils.errors import AgentError, CatalogError
from api_recommender.utils.logger import setup_logger

_EXIT_WORDS = {"quit", "exit"}
# History store failures surface as aiosqlite errors
_TURN_ERRORS = (AgentError, aiosqlite.Error)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{settings.system_name} API recommender assistant")
    parser.add_argument(
        "--docs",
        default=settings.api_docs_path,
        help=f"Path to the markdown API docs (default: {settings.api_docs_path})",
    )
    parser.add_argument("-q", "--query", help="Send a single message and exit")
    parser.add_argument(
        "--db",
        default=settings.history_db_path,
        help=f"Conversation history database (default: {settings.history_db_path})",
    )
    parser.add_argument("--session", default="", help="Session id to continue (default: new session)")
    parser.add_argument("--mode", choices=["cli", "server"], default="cli", help="Run mode (default: cli)")
    parser.add_argument("--host", default=settings.server_host, help=f"Server host (default: {settings.server_host})")
    parser.add_argument("--port", type=int, default=settings.server_port, help=f"Server port (default: {settings.server_port})")
    return parser


async def run_repl(agent: AssistantAgent, session_id: str, query: Optional[str] = None) -> bool:
    """
    Read messages from stdin until quit/exit; errors are printed and the loop continues.

    With a single query the answer is printed and False is returned if the turn failed.
    """
    if query:
        try:
            response, session_id = await agent.handle_turn(session_id, query)
        except _TURN_ERRORS as e:
            print(f"Error: {e}")
            return False
        print(response)
        print(f"\n[session: {session_id}]")
        return True

    print(f"{settings.system_name} API assistant. Type 'quit' or 'exit' to leave.")
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, input, "\n> ")
        message = line.strip()
        if not message:
            continue
        if message.lower() in _EXIT_WORDS:
            break
        try:
            response, session_id = await agent.handle_turn(session_id, message)
        except _TURN_ERRORS as e:
            print(f"Error: {e}")
            continue
        print(f"\n{response}")
        print(f"\n[session: {session_id}]")
    return True


async def _run_cli(args: argparse.Namespace) -> bool:
    catalog = parse_api_docs(resolve_path(args.docs))
    store = HistoryStore(str(resolve_path(args.db)))
    describe_provider()
    await store.async_init()
    try:
        agent = AssistantAgent(catalog, store)
        return await run_repl(agent, args.session, args.query)
    finally:
        await store.close()


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from api_recommender.api.app import create_app

    app = create_app(
        catalog=parse_api_docs(resolve_path(args.docs)),
        history_store=HistoryStore(str(resolve_path(args.db))),
        configure_logging=False,
    )
    logger.info(f"Starting server on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="info", access_log=True)


def main(argv=None):
    """Run the assistant CLI."""
    args = build_parser().parse_args(argv)
    setup_logger(settings.log_level)

    try:
        if args.mode == "server":
            _run_server(args)
        elif not asyncio.run(_run_cli(args)):
            sys.exit(1)
    except CatalogError as e:
        logger.error(f"Failed to load API catalog: {e}")
        sys.exit(1)
    except _TURN_ERRORS as e:
        logger.error(f"Assistant failed: {e}")
        sys.exit(1)
    except (KeyboardInterrupt, EOFError):
        print()


if __name__ == "__main__":
    main()
