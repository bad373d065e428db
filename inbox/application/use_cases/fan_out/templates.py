"""Per-event-type render table for email and push notifications."""

from __future__ import annotations

import html
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from inbox.domain.entities import InboxItemType
from inbox.infrastructure.email import EmailMessage

IPFS_SCHEME = "ipfs://"


@dataclass(frozen=True)
class RenderContext:
    app_base_url: str
    ipfs_gateway_url: str
    default_image_url: str

    def dao_url(self, dao: Any) -> str:
        return f"{self.app_base_url.rstrip('/')}/dao/{dao}"

    def proposal_url(self, dao: Any, proposal_id: Any) -> str:
        return f"{self.dao_url(dao)}/proposals/{proposal_id}"


def resolve_image_url(image_url: Any, gateway_url: str) -> Any:
    """Rewrite ``ipfs://`` references to the HTTP gateway; others pass through."""

    if isinstance(image_url, str) and image_url.startswith(IPFS_SCHEME):
        return gateway_url + image_url[len(IPFS_SCHEME):]
    return image_url


def _image(data: Mapping[str, Any], context: RenderContext, *, fallback: bool) -> Any:
    image_url = data.get("imageUrl")
    if not image_url and fallback:
        image_url = context.default_image_url
    return resolve_image_url(image_url, context.ipfs_gateway_url)


def _escape(value: Any) -> str:
    return html.escape(str(value), quote=True)


def _email_body(image_url: Any, paragraphs: list[str], url: str, label: str) -> str:
    parts = []
    if image_url:
        parts.append(f'<p><img src="{_escape(image_url)}" alt="" width="64" height="64"></p>')
    parts.extend(f"<p>{paragraph}</p>" for paragraph in paragraphs)
    parts.append(f'<p><a href="{_escape(url)}">{label}</a></p>')
    return "".join(parts)


def _execution_status(data: Mapping[str, Any]) -> str:
    return "Execution Failed" if data.get("failed") else "Executed"


def _joined_dao_email(data: Mapping[str, Any], context: RenderContext) -> EmailMessage:
    name = _escape(data["name"])
    return EmailMessage(
        subject=f"You've been added to {data['name']}",
        html_content=_email_body(
            _image(data, context, fallback=True),
            [
                f"You've been added to <strong>{name}</strong>.",
                "Follow it to receive notifications about its proposals.",
            ],
            context.dao_url(data["dao"]),
            "View the DAO",
        ),
    )


def _proposal_email(
    data: Mapping[str, Any], context: RenderContext, *, subject: str, summary: str
) -> EmailMessage:
    return EmailMessage(
        subject=subject,
        html_content=_email_body(
            _image(data, context, fallback=True),
            [
                f"<strong>{_escape(data['daoName'])}</strong>: {summary}",
                f"{_escape(data['proposalId'])} {_escape(data['proposalTitle'])}",
            ],
            context.proposal_url(data["dao"], data["proposalId"]),
            "View the proposal",
        ),
    )


def _proposal_created_email(data: Mapping[str, Any], context: RenderContext) -> EmailMessage:
    return _proposal_email(
        data,
        context,
        subject=f"{data['daoName']}: New proposal {data['proposalId']}",
        summary="a new proposal is open for voting.",
    )


def _proposal_executed_email(data: Mapping[str, Any], context: RenderContext) -> EmailMessage:
    status = _execution_status(data)
    return _proposal_email(
        data,
        context,
        subject=f"{data['daoName']}: Proposal {data['proposalId']} {status}",
        summary=f"a proposal passed and was {status.lower()}.",
    )


def _proposal_closed_email(data: Mapping[str, Any], context: RenderContext) -> EmailMessage:
    return _proposal_email(
        data,
        context,
        subject=f"{data['daoName']}: Proposal {data['proposalId']} Closed",
        summary="a proposal was rejected and closed.",
    )


def _push_payload(
    data: Mapping[str, Any],
    context: RenderContext,
    *,
    title: Any,
    message: str,
    proposal: bool,
) -> dict[str, Any]:
    deep_link: dict[str, Any] = {
        "type": "proposal" if proposal else "dao",
        "coreAddress": data["dao"],
    }
    if proposal:
        deep_link["proposalId"] = data["proposalId"]
    return {
        "title": title,
        "message": message,
        "imageUrl": _image(data, context, fallback=False),
        "deepLink": deep_link,
    }


def _joined_dao_push(data: Mapping[str, Any], context: RenderContext) -> dict[str, Any]:
    return _push_payload(
        data,
        context,
        title=data["name"],
        message=f"You've been added to {data['name']}. Follow it to receive notifications.",
        proposal=False,
    )


def _proposal_created_push(data: Mapping[str, Any], context: RenderContext) -> dict[str, Any]:
    return _push_payload(
        data,
        context,
        title=data["daoName"],
        message=f"New Proposal: {data['proposalTitle']}",
        proposal=True,
    )


def _proposal_executed_push(data: Mapping[str, Any], context: RenderContext) -> dict[str, Any]:
    message = f"Proposal Passed and {_execution_status(data)}: {data['proposalTitle']}"
    if data.get("winningOption"):
        message += f" (outcome: {data['winningOption']})"
    return _push_payload(
        data, context, title=data["daoName"], message=message, proposal=True
    )


def _proposal_closed_push(data: Mapping[str, Any], context: RenderContext) -> dict[str, Any]:
    return _push_payload(
        data,
        context,
        title=data["daoName"],
        message=f"Proposal Rejected and Closed: {data['proposalTitle']}",
        proposal=True,
    )


@dataclass(frozen=True)
class EventTemplate:
    required_fields: tuple[str, ...]
    render_email: Callable[[Mapping[str, Any], RenderContext], EmailMessage]
    render_push: Callable[[Mapping[str, Any], RenderContext], dict[str, Any]]

    def has_required_fields(self, data: Any) -> bool:
        if not isinstance(data, Mapping):
            return False
        return all(data.get(name) is not None for name in self.required_fields)


_PROPOSAL_FIELDS = ("chainId", "dao", "daoName", "proposalId", "proposalTitle")

EVENT_TEMPLATES: dict[str, EventTemplate] = {
    InboxItemType.JOINED_DAO.value: EventTemplate(
        ("chainId", "dao", "name"), _joined_dao_email, _joined_dao_push
    ),
    InboxItemType.PROPOSAL_CREATED.value: EventTemplate(
        _PROPOSAL_FIELDS, _proposal_created_email, _proposal_created_push
    ),
    InboxItemType.PROPOSAL_EXECUTED.value: EventTemplate(
        _PROPOSAL_FIELDS + ("failed",), _proposal_executed_email, _proposal_executed_push
    ),
    InboxItemType.PROPOSAL_CLOSED.value: EventTemplate(
        _PROPOSAL_FIELDS, _proposal_closed_email, _proposal_closed_push
    ),
}


def template_for(item_type: str, data: Any) -> EventTemplate | None:
    """Return the template for ``item_type`` when ``data`` can fill it."""

    template = EVENT_TEMPLATES.get(item_type)
    if template is None or not template.has_required_fields(data):
        return None
    return template


__all__ = [
    "EVENT_TEMPLATES",
    "EventTemplate",
    "RenderContext",
    "resolve_image_url",
    "template_for",
]
