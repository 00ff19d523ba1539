"""Montagem das notificações transacionais (assunto + corpo texto simples)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.protocols.notifier import Notification
from fsm.states.invite import InviteStatus

if TYPE_CHECKING:
    from app.domain.invite import Invite
    from app.domain.registration import RegistrationEntity

EVENT_SIGNATURE = "Interbox 2025"
PAYMENT_METHOD = "PIX"

_FOOTER = (
    "\n\nEste é um email automático, não responda a esta mensagem.\n"
    "Para dúvidas, entre em contato: interbox2025@gmail.com"
)


def format_amount(value: float | None) -> str:
    return f"{value:.2f}" if value is not None else "0.00"


def format_date(value: datetime) -> str:
    return value.strftime("%d/%m/%Y")


def build_payment_confirmation(
    entity: RegistrationEntity,
    paid_at: datetime,
) -> Notification | None:
    """Confirmação de pagamento; None se a inscrição não tem e-mail ou nome."""
    to_email, to_name = entity.contact_email, entity.contact_name
    if not to_email or not to_name:
        return None

    context: dict[str, str] = {
        "tipo": entity.kind.label,
        "valor": format_amount(entity.amount),
        "metodo": PAYMENT_METHOD,
        "data": format_date(paid_at),
        **entity.kind_details(),
    }
    lines = [
        f"Olá {to_name},",
        "",
        "Seu pagamento foi processado com sucesso!",
        "",
        f"Tipo: {context['tipo']}",
        f"Valor: R$ {context['valor']}",
        f"Método: {context['metodo']}",
        f"Data: {context['data']}",
    ]
    for key in ("categoria", "time", "area", "descricao"):
        if key in context:
            lines.append(f"{key.capitalize()}: {context[key]}")

    return Notification(
        kind="payment_confirmation",
        to_email=to_email,
        to_name=to_name,
        subject=f"Pagamento Confirmado - {EVENT_SIGNATURE}",
        body="\n".join(lines) + _FOOTER,
        context=context,
    )


def build_team_invite(invite: Invite) -> Notification:
    """Convite enviado ao atleta."""
    to_name = invite.invited_name or invite.invited_email
    body = (
        f"Olá {to_name},\n\n"
        f"{invite.captain_name or 'O capitão'} convidou você para o time "
        f"{invite.team_name}.\n"
        f"O convite vale até {format_date(invite.expires_at)}.\n"
        "Acesse sua conta para aceitar ou recusar."
    )
    return Notification(
        kind="team_invite",
        to_email=invite.invited_email,
        to_name=to_name,
        subject=f"Convite para Time - {invite.team_name} | {EVENT_SIGNATURE}",
        body=body + _FOOTER,
        context={"invite_id": invite.id, "team_id": invite.team_id},
    )


def build_invite_response(invite: Invite, decision: InviteStatus) -> Notification | None:
    """Resposta do convidado para o capitão; None sem e-mail do capitão."""
    if not invite.captain_email:
        return None
    verb = "aceitou" if decision is InviteStatus.ACEITO else "recusou"
    invited = invite.invited_name or invite.invited_email
    body = (
        f"Olá {invite.captain_name or 'capitão'},\n\n"
        f"{invited} {verb} o convite para o time {invite.team_name}."
    )
    return Notification(
        kind="team_invite_response",
        to_email=invite.captain_email,
        to_name=invite.captain_name,
        subject=f"Resposta ao Convite - {invite.team_name} | {EVENT_SIGNATURE}",
        body=body + _FOOTER,
        context={"invite_id": invite.id, "resposta": str(decision)},
    )
