"""App — coração do gateway: sessões, adapters e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: adapter de conexão e extração de mensagens recebidas
- infra/: implementações concretas de IO (webhook, bridge WhatsApp-Web)
- protocols/: contratos/interfaces
- sessions/: modelo de sessão e registry em memória
- observability/: contexto de logs e métricas

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
