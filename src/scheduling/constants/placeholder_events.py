"""Programări de exemplu exibidas quando a assinatura falha.

`day` segue a convenção da grade (1=segunda). A data real é derivada da
segunda-feira da semana visível no momento do fallback.
"""

from __future__ import annotations

from typing import Any, Final

PLACEHOLDER_EVENTS: Final[tuple[dict[str, Any], ...]] = (
    {
        "title": "Consultație Popescu Maria",
        "start_time": "09:00",
        "end_time": "10:00",
        "day": 1,
        "description": "Consultare cardiologie - control periodic",
        "location": "Cabinet 3",
        "attendees": ("Popescu Maria", "Dr. Ionescu"),
        "organizer": "Dr. Ionescu",
    },
    {
        "title": "Analize sânge - Dumitrescu Ion",
        "start_time": "12:00",
        "end_time": "13:00",
        "day": 1,
        "description": "Recoltare sânge pentru analize complete",
        "location": "Laborator",
        "attendees": ("Dumitrescu Ion", "Asistenta Popa"),
        "organizer": "Asistenta Popa",
    },
    {
        "title": "Vaccinare copil - Stanescu Andrei",
        "start_time": "10:00",
        "end_time": "11:00",
        "day": 3,
        "description": "Vaccinare rutină copil 2 ani",
        "location": "Cabinet pediatrie",
        "attendees": ("Stanescu Andrei", "Mama Stanescu"),
        "organizer": "Dr. Popescu",
    },
    {
        "title": "Control ginecologie - Vasilescu Elena",
        "start_time": "14:00",
        "end_time": "15:00",
        "day": 2,
        "description": "Control periodic ginecologie",
        "location": "Cabinet 5",
        "attendees": ("Vasilescu Elena", "Dr. Dumitrescu"),
        "organizer": "Dr. Dumitrescu",
    },
    {
        "title": "Consultație psihiatrie - Marin Ion",
        "start_time": "13:00",
        "end_time": "14:30",
        "day": 4,
        "description": "Sesiune psihoterapie",
        "location": "Cabinet psihiatrie",
        "attendees": ("Marin Ion", "Dr. Marin"),
        "organizer": "Dr. Marin",
    },
)
