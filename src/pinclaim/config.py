"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from pinclaim.errors import ConfigError
from pinclaim.models.config import ClientConfig

DEFAULT_CONFIG_PATH = "~/.pinclaim/config.toml"


def _decimal(value: object, field: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ConfigError(f"{field} must be a number, got {value!r}") from exc


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "PINCLAIM_",
) -> ClientConfig:
    """Load client configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (PINCLAIM_PIN_SERVICE_URL, etc.)
        2. TOML config file
        3. Defaults from ClientConfig
    """
    raw: dict = {}
    p = Path(config_path or DEFAULT_CONFIG_PATH).expanduser()
    if p.exists():
        with open(p, "rb") as f:
            try:
                raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid config file {p}: {exc}") from exc
    elif config_path is not None:
        raise ConfigError(f"Config file not found: {p}")

    cfg = ClientConfig()

    # ── Service section ────────────────────────────────────
    service = raw.get("service", {})
    if v := service.get("pin_service_url"):
        cfg.pin_service_url = str(v)
    if v := service.get("http_timeout"):
        cfg.http_timeout = float(v)

    # ── Wallet section ─────────────────────────────────────
    wallet = raw.get("wallet", {})
    if v := wallet.get("wallet_url"):
        cfg.wallet_url = str(v)
    if v := wallet.get("wallets_dir"):
        cfg.wallets_dir = str(v)
    if v := wallet.get("signer"):
        cfg.signer = str(v)
    if v := wallet.get("psf_token_id"):
        cfg.psf_token_id = str(v)
    if v := wallet.get("write_price"):
        cfg.write_price = _decimal(v, "wallet.write_price")

    # ── Files section ──────────────────────────────────────
    files = raw.get("files", {})
    if v := files.get("files_dir"):
        cfg.files_dir = str(v)
    if v := files.get("max_upload_size"):
        cfg.max_upload_size = int(v)

    # ── Storage section ────────────────────────────────────
    storage = raw.get("storage", {})
    if v := storage.get("db_path"):
        cfg.db_path = str(v)

    # ── Client section ─────────────────────────────────────
    client = raw.get("client", {})
    if v := client.get("log_level"):
        cfg.log_level = str(v)

    # ── Environment variable overrides (highest priority) ──
    if url := os.environ.get(f"{env_prefix}PIN_SERVICE_URL"):
        cfg.pin_service_url = url
    if url := os.environ.get(f"{env_prefix}WALLET_URL"):
        cfg.wallet_url = url
    if wallets_dir := os.environ.get(f"{env_prefix}WALLETS_DIR"):
        cfg.wallets_dir = wallets_dir
    if signer := os.environ.get(f"{env_prefix}SIGNER"):
        cfg.signer = signer
    if files_dir := os.environ.get(f"{env_prefix}FILES_DIR"):
        cfg.files_dir = files_dir
    if db_path := os.environ.get(f"{env_prefix}DB_PATH"):
        cfg.db_path = db_path

    # Expand ~ in paths
    cfg.wallets_dir = str(Path(cfg.wallets_dir).expanduser())
    cfg.files_dir = str(Path(cfg.files_dir).expanduser())
    if cfg.db_path != ":memory:":
        cfg.db_path = str(Path(cfg.db_path).expanduser())

    return cfg
