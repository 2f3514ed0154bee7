"""Runtime settings for cards-core.

Settings are read from ``CARDS_CORE_*`` environment variables, optionally
layered over a dotenv file. Values from the real environment win over the
file so deployments can override a checked-in ``.env``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import dotenv_values

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

ENV_PREFIX = "CARDS_CORE_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class Settings:
    """Card issuance and logging settings.

    Attributes:
        issuer_bin: 4-digit prefix of every generated card number.
        card_validity_years: Years between issue month and expiry month.
        business_timezone: IANA zone whose calendar drives daily and
            monthly limit resets and same-day cancellation.
        approval_number_prefix: Prefix of generated approval numbers.
        log_level: Root level for the cards_core logger.
        log_json: Emit JSON lines (True) or plain text (False).
    """

    issuer_bin: str = "9410"
    card_validity_years: int = 5
    business_timezone: str = "Asia/Seoul"
    approval_number_prefix: str = "AP"
    log_level: str = "INFO"
    log_json: bool = True

    def __post_init__(self) -> None:
        if len(self.issuer_bin) != 4 or not self.issuer_bin.isdigit():
            raise ValueError(f"issuer_bin must be 4 digits, got {self.issuer_bin!r}")
        if self.card_validity_years <= 0:
            raise ValueError(
                f"card_validity_years must be positive, got {self.card_validity_years}"
            )
        try:
            ZoneInfo(self.business_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown business_timezone: {self.business_timezone!r}") from e
        if self.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log_level: {self.log_level!r}")

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.business_timezone)

    @classmethod
    def from_env(
        cls,
        env_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> Settings:
        """Build settings from the environment.

        Args:
            env_file: Optional dotenv file read before the environment.
            environ: Environment mapping; defaults to os.environ.

        Raises:
            ValueError: If a variable holds an invalid value.
        """
        values: dict[str, str] = {}
        if env_file is not None:
            values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
        values.update(os.environ if environ is None else environ)

        def get(name: str) -> str | None:
            return values.get(ENV_PREFIX + name)

        defaults = cls()
        validity = get("CARD_VALIDITY_YEARS")
        log_json = get("LOG_JSON")

        return cls(
            issuer_bin=get("ISSUER_BIN") or defaults.issuer_bin,
            card_validity_years=_parse_int("CARD_VALIDITY_YEARS", validity)
            if validity is not None
            else defaults.card_validity_years,
            business_timezone=get("BUSINESS_TIMEZONE") or defaults.business_timezone,
            approval_number_prefix=get("APPROVAL_NUMBER_PREFIX")
            or defaults.approval_number_prefix,
            log_level=(get("LOG_LEVEL") or defaults.log_level).upper(),
            log_json=_parse_bool("LOG_JSON", log_json)
            if log_json is not None
            else defaults.log_json,
        )


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")
