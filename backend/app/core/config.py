"""
Configurazione applicazione - Settings
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Definisce le impostazioni dell'applicazione caricate da variabili d'ambiente.
"""


from __future__ import annotations
import logging
import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class Settings(BaseSettings):
    """
    Configurazione applicazione.

    Carica le impostazioni da variabili d'ambiente.
    Valori di default adatti per uso locale a singolo utente.

    Per ottenere un'istanza singleton:
    - In FastAPI: usa `Depends(get_settings)` per Dependency Injection
    - Altrove: usa `get_settings()` direttamente
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------
    # Configurazione Archivio
    # ------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./haulit.db",
        description="URL dell'archivio chiave-valore (formato async SQLAlchemy)",
    )

    db_echo: bool = Field(
        default=False,
        description="Log delle query SQL",
    )

    # ------------------------------------------------------------
    # Configurazione Applicazione
    # ------------------------------------------------------------
    app_name: str = Field(
        default="Haul-It Invoice Pro",
        description="Nome applicazione",
    )

    app_version: str = Field(
        default="1.0.0",
        description="Versione applicazione",
    )

    app_env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Ambiente di esecuzione (development | production | testing)",
    )

    debug: bool = Field(
        default=False,
        description="Modalità debug",
    )

    backend_port: int = Field(
        default=8000,
        description="Porta backend",
    )

    # ------------------------------------------------------------
    # Configurazione Autenticazione
    # ------------------------------------------------------------
    secret_key: str = Field(
        default="changeme-in-production",
        description="Chiave segreta per la firma dei token",
    )

    access_token_expire_minutes: int = Field(
        default=12 * 60,
        description="Minuti di validità dell'access token JWT",
    )

    jwt_algorithm: str = Field(
        default="HS256",
        description="Algoritmo per firma JWT",
    )

    default_admin_username: str = Field(
        default="admin",
        description="Username dell'account creato al primo avvio",
    )

    default_admin_password: str = Field(
        default="password",
        description="Password dell'account creato al primo avvio",
    )

    # ------------------------------------------------------------
    # Configurazione CORS
    # ------------------------------------------------------------
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        description="Origini CORS permesse",
    )

    # ------------------------------------------------------------
    # Configurazione Logging
    # ------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Livello logging",
    )

    # ------------------------------------------------------------
    # Configurazione Fatturazione
    # ------------------------------------------------------------
    invoice_company_name: str = Field(
        default="HAUL-IT PRO",
        description="Ragione sociale in testata fattura",
    )

    invoice_company_tagline: str = Field(
        default="Professional Trucking Services",
        description="Sottotitolo in testata fattura",
    )

    invoice_address: str = Field(
        default="",
        description="Indirizzo per fatture",
    )

    invoice_phone: str = Field(
        default="",
        description="Telefono per fatture",
    )

    invoice_email: str = Field(
        default="",
        description="Email per fatture",
    )

    invoice_payment_terms: str = Field(
        default="Payment Terms: Net 30 Days",
        description="Testo condizioni di pagamento nel piè di pagina",
    )

    invoice_currency_symbol: str = Field(
        default="$",
        description="Simbolo valuta per gli importi stampati",
    )

    # ------------------------------------------------------------
    # Stile PDF
    # ------------------------------------------------------------
    pdf_accent_color: str = Field(
        default="#000000",
        description="Colore principale del documento (#RRGGBB)",
    )

    pdf_muted_color: str = Field(
        default="#646464",
        description="Colore delle etichette di sezione (#RRGGBB)",
    )

    pdf_font_family: str = Field(
        default="Helvetica, Arial, sans-serif",
        description="Font del documento",
    )

    # ------------------------------------------------------------
    # Dati iniziali
    # ------------------------------------------------------------
    seed_default_drivers: bool = Field(
        default=False,
        description="Popola l'elenco autisti dimostrativo se vuoto",
    )

    default_brokers: list[str] = Field(
        default_factory=list,
        description="Broker suggeriti inseriti al primo avvio",
    )

    # ------------------------------------------------------------
    # Validatori
    # ------------------------------------------------------------

    @field_validator("pdf_accent_color", "pdf_muted_color")
    @classmethod
    def validate_hex_color(cls, v: str) -> str:
        """Valida il formato esadecimale dei colori (#RRGGBB)."""
        if not _HEX_COLOR.match(v):
            raise ValueError("Il colore deve essere nel formato #RRGGBB")
        return v.lower()

    @field_validator("default_brokers")
    @classmethod
    def dedupe_default_brokers(cls, v: list[str]) -> list[str]:
        """Rimuove voci vuote e duplicati mantenendo l'ordine."""
        seen: list[str] = []
        for name in v:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    @field_validator("database_url")
    @classmethod
    def warn_relative_sqlite(cls, v: str) -> str:
        """Emette warning se l'archivio SQLite usa un percorso relativo."""
        if v.startswith("sqlite") and ":///./" in v:
            logging.getLogger(__name__).warning(
                f"database_url è relativo: {v}. Usa un percorso assoluto in produzione."
            )
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validazione settings obbligatori in produzione."""
        if self.app_env != "production":
            return self

        errors = []

        if self.secret_key == "changeme-in-production" or len(self.secret_key) < 32:
            errors.append("- secret_key: deve essere cambiato e avere almeno 32 caratteri")

        if self.default_admin_password == "password":
            errors.append("- default_admin_password: non usare la password di default")

        if self.debug:
            errors.append("- debug: deve essere False in produzione")

        for origin in self.cors_origins:
            if "localhost" in origin or "127.0.0.1" in origin:
                errors.append(
                    f"- cors_origins: l'origine '{origin}' non è consentita in produzione"
                )

        if errors:
            error_msg = "Errore di configurazione in produzione:\n" + "\n".join(errors)
            raise ValueError(error_msg)

        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Restituisce l'istanza singleton delle impostazioni.

    Usa lru_cache per garantire che Settings() venga istanziato
    una sola volta e riutilizzato in tutta l'applicazione.
    In fase di test, usa get_settings.cache_clear() per resettare.

    Returns:
        Settings: Istanza delle impostazioni applicazione
    """
    return Settings()
