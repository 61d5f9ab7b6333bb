"""Consulta de disponibilidade."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator

from scheduling.domain.policy import TimeOfDay


class AvailabilityQuery(BaseModel):
    """Parâmetros de busca de slots livres.

    Attributes:
        service_type: Tipo de serviço (define a duração padrão)
        date: Primeiro dia consultado
        end_date: Último dia consultado, inclusivo (padrão: date + 1 dia)
        duration: Duração em minutos (padrão: duração do serviço)
        preferred_times: Filtro de período do dia
    """

    model_config = ConfigDict(frozen=True)

    service_type: str
    date: dt.date
    end_date: dt.date | None = None
    duration: int | None = Field(default=None, ge=1)
    preferred_times: TimeOfDay = TimeOfDay.ANY

    @model_validator(mode="after")
    def _check_range(self) -> AvailabilityQuery:
        if self.end_date is not None and self.end_date < self.date:
            raise ValueError("end_date deve ser igual ou posterior a date")
        return self

    @property
    def last_day(self) -> dt.date:
        return self.end_date or self.date + dt.timedelta(days=1)
