"""API — camada de borda HTTP do gateway.

Responsabilidades:
- Receber requests dos sistemas clientes
- Validar autenticação e payloads
- Traduzir chamadas para o SessionRegistry

Subpastas:
- routes/: endpoints HTTP
- validators/: modelos de request e checagens de obrigatoriedade

NÃO PODE conter: FSM, regras de sessão, acesso direto ao cliente WhatsApp.
"""
