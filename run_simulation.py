"""
Console simulation of one OPD morning with 3 doctors.
Walks through online bookings, walk-ins, a paid priority patient, an emergency,
then a cancellation and a no-show, printing the allocation after each phase.
"""

import os
import sys
import json
import logging
from typing import Optional

# Add current directory to path so imports work
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from allocator import TokenAllocationEngine
from generators import default_roster
from models import TokenSource

# --- CONFIGURATION ---
LOG_LEVEL = os.environ.get("OPD_LOG_LEVEL", "INFO").upper()
EXPORT_PATH = os.environ.get("OPD_EXPORT_PATH", "opd_snapshot.json")  # empty string disables export
# ---------------------

logger = logging.getLogger("Simulation")


def build_snapshot(engine: TokenAllocationEngine) -> dict:
    """Serializes slots, their tokens and the unplaced requests."""
    data = {
        "slots": [],
        "unallocated": [r.model_dump(mode='json') for r in engine.unallocated_requests()],
        "statistics": engine.get_statistics()
    }

    for slot in engine.list_slots():
        entry = slot.model_dump(mode='json')
        entry["tokens"] = [
            {
                "sequence": token.sequence,
                "token_id": token.token_id,
                "request_id": token.request_id,
                "patient_id": token.patient_id,
                "source": token.source.value,
                "status": token.status.value,
            }
            for token in engine.list_allocations(slot.id)
        ]
        data["slots"].append(entry)

    return data


def export_snapshot(engine: TokenAllocationEngine, filename: str) -> None:
    logger.info(f"💾 Exporting allocation snapshot to {filename}...")
    with open(filename, 'w') as f:
        json.dump(build_snapshot(engine), f, indent=2)
    logger.info("✅ Snapshot exported.")


def print_snapshot(engine: TokenAllocationEngine) -> None:
    print("--- Current allocations by slot ---")
    for slot in engine.list_slots():
        print(f"{slot.id} ({slot.doctor_id} {slot.start:%H:%M}-{slot.end:%H:%M}, cap {slot.capacity})")
        tokens = engine.list_allocations(slot.id)
        for token in tokens:
            print(f"  #{token.sequence} {token.patient_id} [{token.source.value}] "
                  f"from {token.request.preferred_slot_id}")
        if not tokens:
            print("  <empty>")

    waiting = engine.unallocated_requests()
    if waiting:
        print(f"Unallocated ({len(waiting)}): " + ", ".join(r.patient_id for r in waiting))


def run(export_path: Optional[str] = None) -> TokenAllocationEngine:
    """Run the scenario and return the engine in its final state."""
    engine = TokenAllocationEngine(default_roster())

    print("=== Morning online bookings ===")
    for i in range(1, 9):
        engine.submit_request(f"P-online-{i}", TokenSource.ONLINE, "drA-09")
    print_snapshot(engine)

    print("\n=== Walk-in patients arrive ===")
    for i in range(1, 6):
        engine.submit_request(f"P-walkin-{i}", TokenSource.WALK_IN)
    print_snapshot(engine)

    print("\n=== Paid priority patient added (should jump ahead) ===")
    priority = engine.submit_request("P-priority-1", TokenSource.PRIORITY, "drA-09")
    print_snapshot(engine)

    print("\n=== Emergency case inserted (highest priority) ===")
    emergency = engine.submit_request("P-emergency-1", TokenSource.EMERGENCY, "drA-09")
    print_snapshot(engine)

    print("\n=== One patient cancels, one no-show ===")
    engine.cancel_request(priority.id)
    engine.mark_no_show(emergency.id)
    print_snapshot(engine)

    print("\n📊 FINAL STATISTICS")
    print(engine.get_statistics())

    if export_path:
        export_snapshot(engine, export_path)

    return engine


def main():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )
    logger.info("🚀 Starting OPD token allocation simulation...")
    run(EXPORT_PATH or None)
    print("\n✅ Simulation Complete.")


if __name__ == "__main__":
    main()
