"""
Centralized constants and configuration values for the draft room.

This module contains all magic numbers, default values, and timing
constants used by the auction state machine.
"""

from typing import Final

# ==================== COUNTDOWN WINDOWS ====================
START_TIMER_MS: Final[int] = 60_000       # opening window for a fresh slot
ACTIVE_BID_TIMER_MS: Final[int] = 15_000  # window restarted by every bid

# ==================== CATEGORIES ====================
CATEGORY_ORDER: Final[tuple] = ('A', 'B', 'C', 'D', 'E')

# ==================== LOBBY LIMITS ====================
MIN_PARTICIPANTS: Final[int] = 2
MAX_PARTICIPANTS: Final[int] = 20
MAX_DISPLAY_NAME_LENGTH: Final[int] = 10
MAX_AUCTION_NAME_LENGTH: Final[int] = 60
DEFAULT_ADMIN_NAME: Final[str] = 'Admin'

# ==================== REALTIME ====================
AUCTION_ROOM_PREFIX: Final[str] = 'auction:'
AUCTION_STATE_EVENT: Final[str] = 'auction_state'

# ==================== CLIENT IDENTITY ====================
CLIENT_ID_HEADER: Final[str] = 'X-Client-Id'
