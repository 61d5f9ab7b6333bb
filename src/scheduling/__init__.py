"""Scheduling - motor de agendamento de atendimentos.

Subpastas:
- domain/: modelos (política, agendamento, slots, resultados)
- protocols/: contratos dos colaboradores externos
- services/: calendário comercial, slots, conflitos, recorrência, motor, lembretes
- infra/: store autoritativo, backends de persistência, adaptadores
- observability/: correlation_id para logs
- bootstrap/: composition root

Padrão: services decidem; infra guarda; fsm governa status; config configura.
"""
