"""Exceções compartilhadas do motor de agendamento.

Resultados de negócio (slot indisponível, agendamento inexistente) NAO
são exceções: voltam como SchedulingResult. As classes abaixo cobrem
falhas de configuração, infraestrutura e uso incorreto da API.
"""

from __future__ import annotations


class SchedulingError(RuntimeError):
    """Base para erros do motor de agendamento."""


class ConfigurationError(SchedulingError):
    """Configuração inválida (env, arquivo de política)."""


class SchedulingValidationError(SchedulingError, ValueError):
    """Entrada malformada em operação que não retorna Result."""


class InfrastructureError(SchedulingError):
    """Base para falhas de infraestrutura transitórias."""


class PersistenceError(InfrastructureError):
    """Falha ao salvar/carregar snapshot no backend de persistência."""


class CollaboratorError(InfrastructureError):
    """Falha de colaborador externo (calendário, link de reunião, notificação)."""
