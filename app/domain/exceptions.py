from __future__ import annotations


class DomainError(Exception):
    """Base para erros de dominio."""


class MalformedPurchaseEventError(DomainError):
    """Notificacao de compra sem dados minimos (email, payload legivel)."""


class WebhookSignatureError(DomainError):
    """Assinatura do webhook ausente ou invalida."""


class SubscriptionStoreUnavailableError(DomainError):
    """Falha transitoria no armazenamento; o provedor pode reenviar o evento."""


class EmailAlreadyExistsError(DomainError):
    """Ja existe conta com este email."""


class AccountNotFoundError(DomainError):
    """Nenhuma conta registrada para o email informado."""


class PendingActivationNotFoundError(DomainError):
    """Ativacao pendente inexistente."""


class InvalidTierError(DomainError):
    """Tier fora da tabela configurada."""


class PurchaseLookupError(DomainError):
    """Nao foi possivel consultar as vendas no provedor de pagamento."""
