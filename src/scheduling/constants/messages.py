"""Mensagens exibidas ao usuário (romeno, idioma da interface MedFlow)."""

from __future__ import annotations

from typing import Final

AUTH_REQUIRED_CREATE: Final = (
    "Trebuie să fiți autentificat pentru a crea programări. Vă rugăm să vă conectați."
)
AUTH_REQUIRED_MODIFY: Final = (
    "Trebuie să fiți autentificat pentru a modifica programări. Vă rugăm să vă conectați."
)

PERMISSION_ERROR: Final = "Nu aveți permisiunea să efectuați această operațiune."
NETWORK_ERROR: Final = "Eroare de conexiune. Verificați internetul și încercați din nou."
SERVER_ERROR: Final = "Eroare pe server. Vă rugăm să încercați din nou în câteva minute."
SESSION_EXPIRED_ERROR: Final = "Sesiunea a expirat. Vă rugăm să vă autentificați din nou."
NOT_FOUND_ERROR: Final = "Programarea nu mai există."
SAVE_PENDING_ERROR: Final = (
    "Programarea este încă în curs de salvare. Încercați din nou în câteva momente."
)
UNKNOWN_ERROR: Final = "A apărut o eroare neașteptată. Vă rugăm să încercați din nou."

RESCHEDULE_FAILED_PREFIX: Final = "Programarea nu a putut fi mutată."
UPDATE_FAILED_PREFIX: Final = "Programarea nu a putut fi actualizată."
DELETE_FAILED_PREFIX: Final = "Programarea nu a putut fi ștearsă."
CREATE_FAILED_PREFIX: Final = "Programarea nu a putut fi creată."

APPOINTMENT_CREATED: Final = "Programarea a fost creată cu succes."
APPOINTMENT_UPDATED: Final = "Programarea a fost actualizată."
APPOINTMENT_DELETED: Final = "Programarea a fost ștearsă."

# Validação de formulário
TITLE_REQUIRED: Final = "Titlul evenimentului este obligatoriu"
TITLE_TOO_LONG: Final = "Titlul nu poate depăși 100 de caractere"
START_TIME_REQUIRED: Final = "Ora de început este obligatorie"
END_TIME_REQUIRED: Final = "Ora de sfârșit este obligatorie"
END_BEFORE_START: Final = "Ora de sfârșit trebuie să fie după ora de început"
INVALID_TIME_FORMAT: Final = "Ora trebuie să fie în formatul HH:MM"
INVALID_DATE: Final = "Data programării nu este validă"
SAME_DAY_REQUIRED: Final = "Programarea trebuie să se încheie în aceeași zi"
DESCRIPTION_TOO_LONG: Final = "Descrierea nu poate depăși 500 de caractere"
CONFLICT_ERROR: Final = "Există deja o programare la această dată și oră."

# Valores padrão de criação
DEFAULT_LOCATION: Final = "Cabinet principal"
DEFAULT_ORGANIZER: Final = "Medicul curant"
DEFAULT_DESCRIPTION_TEMPLATE: Final = "Programare pentru {title}"
