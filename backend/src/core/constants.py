"""Application constants and configuration values."""

from core.config import FRONTEND_URL

# Database field lengths
MAX_STRING_LENGTH = 255
MAX_REASON_LENGTH = 255
MAX_NOTES_LENGTH = 1000

# Database connection settings
DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes

# CORS origins for development and production
_CORS_ORIGINS_RAW = [
    "http://localhost:5173",      # React dev server (Vite) - localhost
    FRONTEND_URL,
]

# Filter out None values and empty strings to avoid CORS errors
CORS_ORIGINS = [origin for origin in _CORS_ORIGINS_RAW if origin and origin.strip()]

# Day-of-week convention used by the scheduling core: 0=Sunday .. 6=Saturday
DAY_NAMES_PT = [
    'domingo', 'segunda-feira', 'terça-feira', 'quarta-feira',
    'quinta-feira', 'sexta-feira', 'sábado'
]

# Appointment lifecycle statuses
APPOINTMENT_STATUS_SCHEDULED = 'SCHEDULED'
APPOINTMENT_STATUS_CONFIRMED = 'CONFIRMED'
APPOINTMENT_STATUS_IN_PROGRESS = 'IN_PROGRESS'
APPOINTMENT_STATUS_COMPLETED = 'COMPLETED'
APPOINTMENT_STATUS_CANCELLED = 'CANCELLED'
APPOINTMENT_STATUS_NO_SHOW = 'NO_SHOW'

# Statuses that never block a slot
TERMINAL_APPOINTMENT_STATUSES = (APPOINTMENT_STATUS_CANCELLED, APPOINTMENT_STATUS_NO_SHOW)

# Statuses from which an appointment may still be moved or cancelled
RESCHEDULABLE_APPOINTMENT_STATUSES = (APPOINTMENT_STATUS_SCHEDULED, APPOINTMENT_STATUS_CONFIRMED)
CANCELLABLE_APPOINTMENT_STATUSES = (
    APPOINTMENT_STATUS_SCHEDULED, APPOINTMENT_STATUS_CONFIRMED, APPOINTMENT_STATUS_IN_PROGRESS
)

# Fallback text when a blocked date has no reason
DEFAULT_BLOCK_REASON = 'Sem motivo especificado'
