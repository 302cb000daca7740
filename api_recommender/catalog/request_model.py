"""
Request and event payload model of the UMI APIs.

The models serve two purposes: they are rendered into the payload synthesis
prompts as the target schema, and synthesized JSON payloads are linted
against them. Every field is optional; payloads only carry what the user named.
"""

import typing
from typing import List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel


class PayloadModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class Detail(PayloadModel):
    name: Optional[str] = None
    value: Optional[str] = None


class Meta(PayloadModel):
    name: Optional[str] = None
    tenure: Optional[str] = None
    tenure_unit: Optional[str] = None
    interval: Optional[str] = None
    interval_unit: Optional[str] = None
    interest: Optional[str] = None
    interest_unit: Optional[str] = None
    tds_fee: Optional[str] = None
    tds_fee_unit: Optional[str] = None
    pre_mature_withdrawal_fee: Optional[str] = None
    pre_mature_withdrawal_fee_unit: Optional[str] = None
    switch_fee: Optional[str] = None
    switch_fee_unit: Optional[str] = None
    interest_type: Optional[str] = None
    nominee_name: Optional[str] = None
    nominee_relation: Optional[str] = None
    wallet_address: Optional[str] = None
    to_wallet_address: Optional[str] = None
    from_wallet_address: Optional[str] = None
    to_custodian_address: Optional[str] = None
    from_custodian_address: Optional[str] = None
    vpa: Optional[str] = None
    to_vpa: Optional[str] = None
    from_vpa: Optional[str] = None
    user_vpa: Optional[str] = None
    marketplace_id: Optional[str] = None
    org_id: Optional[str] = None
    msp_id: Optional[str] = None
    routing_mode: Optional[str] = None
    payment_ref_id: Optional[str] = None
    payment_msg_id: Optional[str] = None
    payment_vpa: Optional[str] = None
    payment_mode: Optional[str] = None
    payment_date: Optional[str] = None
    interest_accrued: Optional[str] = None
    interest_accrued_unit: Optional[str] = None
    interest_paid: Optional[str] = None
    interest_paid_unit: Optional[str] = None
    payout_amount: Optional[str] = None
    payout_amount_unit: Optional[str] = None
    client_id: Optional[str] = None
    signal_details: Optional[str] = None
    id: Optional[str] = None
    query_type: Optional[str] = None
    collection_name: Optional[str] = None
    payload_required: Optional[str] = None
    payload: Optional[str] = None
    payload_type: Optional[str] = None
    payment_amount: Optional[str] = None
    valid_till: Optional[str] = None
    template_id: Optional[str] = None
    expiry_date: Optional[str] = None
    use_case_id: Optional[str] = None
    locked_by: Optional[str] = None
    locked_for: Optional[str] = None
    quantity: Optional[str] = None
    content_type: Optional[str] = None
    details: Optional[List[Detail]] = None


class Account(PayloadModel):
    type: Optional[str] = None
    address: Optional[str] = None
    vpa: Optional[str] = None


class BusinessIdentifier(PayloadModel):
    type: Optional[str] = None
    id: Optional[str] = None
    public_key: Optional[str] = None
    signature: Optional[str] = None
    callback_url: Optional[str] = None
    account: Optional[List[Account]] = None
    meta: Optional[Meta] = None


class Context(PayloadModel):
    request_id: Optional[str] = None
    msg_id: Optional[str] = None
    is_async: Optional[bool] = None
    is_umi_compliant: Optional[bool] = Field(default=None, alias="isUMICompliant")
    idempotency_key: Optional[str] = None
    network_id: Optional[str] = None
    wrapper_contract: Optional[str] = None
    contract_name: Optional[str] = None
    method_name: Optional[str] = None
    sender: Optional[str] = None
    receiver: Optional[str] = None
    timestamp: Optional[str] = None
    purpose: Optional[str] = None
    prod_type: Optional[str] = None
    collection: Optional[str] = None
    type: Optional[str] = None
    version: Optional[str] = None
    subtype: Optional[str] = None
    action: Optional[str] = None
    trace_details: Optional[str] = None
    original_request_id: Optional[str] = None
    original_timestamp: Optional[str] = None
    secure_token: Optional[str] = None
    status: Optional[str] = None
    code: Optional[str] = None
    meta: Optional[Meta] = None


class TokenizedAsset(PayloadModel):
    version: Optional[str] = None
    id: Optional[str] = None
    value: Optional[str] = None
    unit: Optional[str] = None
    creation_timestamp: Optional[str] = None
    issuer_signature: Optional[str] = None
    issuer_address: Optional[str] = None
    custodian_address: Optional[str] = None
    owner_address: Optional[str] = None
    type: Optional[str] = None
    serial_number: Optional[str] = None
    tag: Optional[str] = None
    meta: Optional[Meta] = None
    parent_id: Optional[str] = None
    status: Optional[str] = None


class Data(PayloadModel):
    type: Optional[str] = None
    tokenized_asset: Optional[List[TokenizedAsset]] = None
    key_value: Optional[List[Detail]] = None
    meta: Optional[Meta] = None


class Transaction(PayloadModel):
    id: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    creation_timestamp: Optional[str] = None
    status: Optional[str] = None
    publisher_name: Optional[str] = None
    publisher_vpa: Optional[str] = Field(default=None, alias="publisherVPA")
    publisher_wallet_address: Optional[str] = None
    publisher_signature: Optional[str] = None
    publisher_logo_url: Optional[str] = None
    terms_and_conditions_url: Optional[str] = None
    data: Optional[Data] = None


class Identity(PayloadModel):
    type: Optional[str] = None
    id: Optional[str] = None
    category: Optional[str] = None
    creation_timestamp: Optional[str] = None
    last_update_timestamp: Optional[str] = None
    status: Optional[str] = None
    issuer: Optional[str] = None
    entity_type: Optional[str] = None
    password: Optional[str] = None
    alias: Optional[str] = None
    network_alias: Optional[str] = None
    organisation_alias: Optional[str] = None
    certificate: Optional[str] = None
    endpoint: Optional[str] = None
    bridge_alias: Optional[str] = None
    net_id: Optional[str] = None
    layer: Optional[str] = None
    custody_type: Optional[str] = None


class Event(PayloadModel):
    id: Optional[str] = None
    type: Optional[str] = None
    event_type: Optional[str] = None
    category: Optional[str] = None
    timestamp: Optional[str] = None
    creation_timestamp: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    data: Optional[str] = None
    meta: Optional[Meta] = None


class Payload(PayloadModel):
    type: Optional[str] = None
    tokenized_asset: Optional[List[TokenizedAsset]] = None
    transaction: Optional[List[Transaction]] = None
    identity: Optional[List[Identity]] = None
    key_value: Optional[List[Detail]] = None
    event: Optional[List[Event]] = None
    meta: Optional[Meta] = None


class Request(PayloadModel):
    source: Optional[List[BusinessIdentifier]] = None
    destination: Optional[List[BusinessIdentifier]] = None
    context: Optional[Context] = None
    payload: Optional[Payload] = None
    signature: Optional[str] = None


class EventPayload(PayloadModel):
    event: Optional[List[Event]] = None


class EventEnvelope(PayloadModel):
    payload: Optional[EventPayload] = None


_SCALAR_NAMES = {str: "string", bool: "boolean", int: "integer", float: "number"}


def _unwrap(annotation) -> tuple:
    """Return (inner type, is_list) for Optional[...] / List[...] annotations."""
    is_list = False
    while True:
        origin = typing.get_origin(annotation)
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if origin is typing.Union and args:
            annotation = args[0]
        elif origin in (list, List) and args:
            annotation = args[0]
            is_list = True
        else:
            return annotation, is_list


def describe_model(root: Type[PayloadModel]) -> str:
    """Render a model and every nested model as an indented field listing.

    Field names are the wire (camelCase) names; nested models are listed
    after the model that references them.
    """
    blocks = []
    pending = [root]
    seen = set()

    while pending:
        model = pending.pop(0)
        if model in seen:
            continue
        seen.add(model)

        lines = [f"{model.__name__}:"]
        for name, info in model.model_fields.items():
            wire_name = info.alias or name
            inner, is_list = _unwrap(info.annotation)
            if isinstance(inner, type) and issubclass(inner, PayloadModel):
                type_name = inner.__name__
                pending.append(inner)
            else:
                type_name = _SCALAR_NAMES.get(inner, getattr(inner, "__name__", str(inner)))
            lines.append(f"  {wire_name}: {type_name}{'[]' if is_list else ''}")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)


def lint_payload(data: dict, model: Type[PayloadModel] = Request) -> List[str]:
    """Validate a decoded payload; return human readable problems (empty when valid)."""
    try:
        model.model_validate(data)
    except PydanticValidationError as e:
        return [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
    return []
