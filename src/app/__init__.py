"""App: coração do sistema: orquestração, domínio e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: modelos (Identity, Invite, RegistrationEntity, PaymentEvent)
- services/: cache de credenciais, reconciliação de webhooks, convites
- infra/: implementações concretas de IO (Firestore, google-auth, SMTP)
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
