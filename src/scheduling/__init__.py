"""Scheduling: núcleo do calendário de agendamentos do MedFlow.

Subpastas:
- bootstrap/: composition root (clientes, logging, wiring do calendário)
- domain/: modelos imutáveis (CalendarEvent, drafts, sessão, intervalo)
- services/: grade de tempo, reagendamento, cache, fronteira, validação
- protocols/: contratos do store de documentos e do notificador
- infra/: implementações concretas (Firestore, memória, notificação)
- observability/: correlation id dos gestos e operações
- constants/: mensagens exibidas ao usuário e dados de placeholder

Padrão: scheduling executa; fsm governa o gesto; config e utils apoiam.
"""
