"""
Application constants

Keyword lexicons and lookup tables used by the deterministic fallbacks.
All tables are immutable.
"""

from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

# ============================================================================
# Classification lexicons
# ============================================================================

# Off-topic purchase / vehicle terms
OFF_TOPIC_TERMS: FrozenSet[str] = frozenset({
    "buy", "buying", "bought", "purchase", "purchasing", "purchased", "sell", "selling", "sold",
    "lamborghini", "lamborgini", "car", "cars", "vehicle", "vehicles", "shopping",
})

# Terms that keep an utterance in-domain even when it mentions off-topic terms
DOMAIN_TERMS: Tuple[str, ...] = ("asset", "bond", "token", "transaction", "api", "payload")

EXPLANATION_PHRASES: Tuple[str, ...] = (
    "explain", "what is", "what does", "tell me about", "how does", "describe", "meaning of",
)

CREATION_PHRASES: Tuple[str, ...] = (
    "create", "make", "generate", "build", "new", "want to", "need to", "burn", "lock",
)

# Nouns that mark a creation request as a fresh, self-contained one
NEW_REQUEST_NOUNS: Tuple[str, ...] = ("asset", "bond", "transaction", "token", "gold")

YES_NO_TOKENS: FrozenSet[str] = frozenset({
    "yes", "no", "y", "n", "yeah", "yep", "nope", "true", "false", "ok", "okay", "sure",
})

# Utterances with at most this many tokens are treated as answers
SHORT_ANSWER_MAX_TOKENS = 3

# ============================================================================
# Slot lexicons
# ============================================================================

# Usecase keyword -> canonical usecase. Longer keywords first so "gold bond" beats "bond".
USECASE_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("fixed deposit", "fd"),
    ("mutual fund", "mutual fund"),
    ("gold bond", "gold bond"),
    ("insurance", "insurance"),
    ("bond", "bond"),
    ("fd", "fd"),
    ("mf", "mutual fund"),
)

USECASE_CUES: Tuple[str, ...] = ("usecase", "use case", "build")

# Operation keyword -> canonical operation value
OPERATION_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("create", "create"),
    ("issue", "create"),
    ("burn", "burn"),
    ("manage", "burn"),
    ("trade", "trade"),
    ("settle", "trade"),
)

# Operation -> API type hint used in the API selection prompt
OPERATION_API_TYPES: Mapping[str, str] = MappingProxyType({
    "create": "req issue",
    "burn": "req manage",
    "trade": "req settle",
})

# Fields the fallback extractor recognises (canonical casing)
KNOWN_FIELDS: Tuple[str, ...] = (
    "id", "value", "key", "toWalletAddress", "fromWalletAddress",
    "walletAddress", "requestId", "msgId", "name", "type", "eventType",
    "timestamp", "status", "unit", "serialNumber",
    "startYear", "endYear", "policyNumber", "premium", "coverageAmount",
    "principal", "interestRate", "tenure", "maturityDate",
    "quantity", "purity", "price", "units", "nav", "investmentAmount",
)

EVENT_CUES: Tuple[str, ...] = ("event payload", "event fields", "event will have", "event")

# usecase -> operation -> suggested request fields
USECASE_FIELDS: Mapping[str, Mapping[str, Tuple[str, ...]]] = MappingProxyType({
    "insurance": MappingProxyType({
        "create": ("startYear", "endYear", "policyNumber", "premium", "coverageAmount", "type"),
        "burn": ("policyNumber", "type", "id"),
        "trade": ("policyNumber", "type", "id", "value"),
    }),
    "fd": MappingProxyType({
        "create": ("principal", "interestRate", "tenure", "maturityDate", "type"),
        "burn": ("id", "type", "principal"),
        "trade": ("id", "type", "value", "principal"),
    }),
    "gold bond": MappingProxyType({
        "create": ("quantity", "purity", "price", "type", "id"),
        "burn": ("id", "type", "quantity"),
        "trade": ("id", "type", "value", "quantity"),
    }),
    "bond": MappingProxyType({
        "create": ("quantity", "purity", "price", "type", "id"),
        "burn": ("id", "type", "quantity"),
        "trade": ("id", "type", "value", "quantity"),
    }),
    "mutual fund": MappingProxyType({
        "create": ("units", "nav", "investmentAmount", "type", "id"),
        "burn": ("id", "type", "units"),
        "trade": ("id", "type", "value", "units"),
    }),
})

# ============================================================================
# Fixed responses
# ============================================================================

REDIRECT_MESSAGE = (
    "I'm an AI agent for the UMI project. I can only help you build API requests "
    "and answer questions related to this project. How can I help you with "
    "UMI-related requests?"
)

UMI_COMPLIANT_ANSWER = (
    "UMI compliant means that a request adheres to the **Unified Market Interface** (UMI) "
    "compliance standard. UMI is a standard that ensures interoperability and standardization "
    "across different market participants and systems. When a request is UMI compliant, it "
    "follows the Unified Market Interface specifications for data exchange and communication "
    "protocols."
)

UMI_ANSWER = (
    "UMI stands for **Unified Market Interface**. It's a compliance standard that ensures "
    "interoperability and standardization across different market participants and systems. "
    "When a request is UMI compliant, it adheres to the Unified Market Interface specifications "
    "for data exchange and communication protocols."
)

ASYNC_ANSWER = """In the UMI project, the **async** field (or **isAsync**) is a boolean flag in the request context that determines how the API request is processed.

**Async Flow (isAsync = true):**
1. FSP commits the transaction on DLT (Distributed Ledger Technology)
2. Chaincode sends an event to FSP via gRPC
3. FSP produces the event in Kafka
4. Backend consumes the event from Kafka

**Sync Flow (isAsync = false or omitted):**
The API processes the request synchronously, waiting for the operation to complete before returning a response.

When you set 'isAsync: true' in your request, the transaction is committed on DLT first, then events are propagated through gRPC and Kafka for backend processing."""
