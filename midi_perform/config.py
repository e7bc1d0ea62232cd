"""Runtime settings (timings, devices, mapping sources)."""

from dataclasses import dataclass, field

# Wait for a keyboard modifier to stick.
MOD_DELAY_MS = 5
# Hold time for a tapped key.
KEY_DELAY_MS = 40
# Wait after system keys such as Esc.
SYS_DELAY_MS = 400

POLL_INTERVAL_SEC = 1.0


@dataclass
class Settings:
    modifier_delay_ms: int = MOD_DELAY_MS
    key_delay_ms: int = KEY_DELAY_MS
    system_delay_ms: int = SYS_DELAY_MS
    poll_interval_sec: float = POLL_INTERVAL_SEC
    # Input port names; empty means first available.
    devices: list[str] = field(default_factory=list)
    mapping_file: str | None = None
    builtin_layout: bool = True
    dry_run: bool = False
    verbose: bool = False
