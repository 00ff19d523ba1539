"""Connectors por gateway: autenticidade e parsing de webhooks.

Estrutura:
- payments/: FlowPay (HMAC + timestamp) e OpenPix (authorization)
"""

__all__: list[str] = []
