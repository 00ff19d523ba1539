"""API: camada de borda HTTP.

Responsabilidades:
- Receber webhooks dos gateways de pagamento e requests do frontend
- Validar assinaturas e payloads
- Normalizar dados para modelos internos
- Resolver a identidade do chamador (dependências FastAPI)

Subpastas:
- connectors/: autenticidade e parsing de webhooks por gateway
- normalizers/: payload de gateway → PaymentEvent
- dependencies/: require_auth, optional_auth
- routes/: endpoints HTTP (webhooks, convites, auth, health)

NÃO PODE conter: FSM, regras de negócio, acesso direto ao store.
"""
