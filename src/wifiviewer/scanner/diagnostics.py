"""Discovery results and the diagnostic payload returned when no probe works.

A failed scan is a value, not an exception: the caller shows the
diagnostic to the user so missing tools or permissions can be fixed.
"""

from dataclasses import dataclass, field

from wifiviewer.scanner.base import ProbeAttempt, WifiRecord

NO_DATA_MESSAGE = "No BSSID found - check permissions and wireless tools"
PERMISSION_HINT = "You may need to run with sudo for some commands"


@dataclass
class ScanSuccess:
    records: list[WifiRecord]
    adapter_name: str
    attempts: list[ProbeAttempt] = field(default_factory=list)


@dataclass
class DiagnosticEntry:
    adapter_name: str
    applicable: bool
    invoked: bool
    exit_succeeded: bool
    output_excerpt: str
    error_excerpt: str
    notes: list[str]
    timed_out: bool = False
    cancelled: bool = False


@dataclass
class ScanDiagnostic:
    entries: list[DiagnosticEntry]
    message: str = NO_DATA_MESSAGE
    hints: list[str] = field(default_factory=list)
    cancelled: bool = False

    def to_lines(self) -> list[str]:
        """Render as the flat list of strings the viewer shows in place of BSSIDs."""
        lines = ["=== DEBUG INFO ==="]
        # Other platforms' adapters only matter when nothing applied here
        any_applicable = any(entry.applicable for entry in self.entries)
        for entry in self.entries:
            if not entry.applicable:
                if any_applicable:
                    continue
                lines.append(f"{entry.adapter_name}: skipped ({entry.error_excerpt})")
                continue
            if entry.exit_succeeded:
                status = "succeeded, no BSSID"
            elif entry.timed_out:
                status = "timed out"
            elif entry.cancelled:
                status = "cancelled"
            elif entry.invoked:
                status = "failed"
            else:
                status = "not run"
            lines.append(f"{entry.adapter_name}: {status}")
            if entry.output_excerpt:
                lines.append(f"{entry.adapter_name} output: {entry.output_excerpt}")
            if entry.error_excerpt:
                lines.append(f"{entry.adapter_name} error: {entry.error_excerpt}")
            lines.extend(f"{entry.adapter_name} note: {note}" for note in entry.notes)
        lines.append("=== END DEBUG ===")
        if self.cancelled:
            lines.append("Scan cancelled before all probes ran")
        lines.append(self.message)
        lines.extend(self.hints)
        return lines


DiscoveryResult = ScanSuccess | ScanDiagnostic


def excerpt(text: str, limit: int) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [{len(text) - limit} more characters]"


def build_diagnostic(
    attempts: list[ProbeAttempt],
    *,
    tools: list[str],
    cancelled: bool = False,
    excerpt_chars: int = 2000,
) -> ScanDiagnostic:
    """Summarize every attempt for display.

    ``tools`` names the executables the applicable adapters depend on,
    in chain order.
    """
    entries = [
        DiagnosticEntry(
            adapter_name=a.adapter_name,
            applicable=a.applicable,
            invoked=a.invoked,
            exit_succeeded=a.exit_succeeded,
            output_excerpt=excerpt(a.raw_output, excerpt_chars),
            error_excerpt=excerpt(a.raw_error, excerpt_chars),
            notes=list(a.notes),
            timed_out=a.timed_out,
            cancelled=a.cancelled,
        )
        for a in attempts
    ]
    hints: list[str] = []
    if tools:
        hints.append("Required tools: " + ", ".join(tools))
    else:
        hints.append("No scanning tool is supported on this platform")
    hints.append(PERMISSION_HINT)
    return ScanDiagnostic(entries=entries, hints=hints, cancelled=cancelled)
