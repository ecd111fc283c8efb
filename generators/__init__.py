from .roster import build_roster, default_roster, slot_id_for

__all__ = ["build_roster", "default_roster", "slot_id_for"]
