"""
Session Report - markdown report of one price update run

One file per run, ``price-update-<session_id>.md``, with a header block,
a summary and a per-vendor result table.
"""

from pathlib import Path
from typing import Any, Dict, List


class SessionReportWriter:
    """
    Writes finished update sessions as markdown.

    Usage:
        writer = SessionReportWriter(log_dir="./logs")
        path = writer.write(session.to_dict())
    """

    def __init__(self, log_dir: str = "./logs"):
        self.dir = Path(log_dir)

    def path_for(self, session_id: str) -> Path:
        return self.dir / f"price-update-{session_id}.md"

    def write(self, session: Dict[str, Any]) -> Path:
        """
        Render a session snapshot to disk.

        Args:
            session: Output of ``PriceUpdateSession.to_dict()``

        Returns:
            Path of the written report
        """
        self.dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(session["sessionId"])
        path.write_text(self.render(session), encoding="utf-8")
        return path

    def render(self, session: Dict[str, Any]) -> str:
        lines: List[str] = [f"# Price Update Run ({session['sessionId']})", ""]
        lines.append(self._kv("Status", session["status"]))
        lines.append(self._kv("Started", session["startTime"]))
        lines.append(self._kv("Finished", session.get("endTime") or "-"))
        if session.get("error"):
            lines.append(self._kv("Error", session["error"]))
        lines.append("")

        lines += ["---", "", "## Summary", ""]
        lines.append(self._kv("Vendors", session["totalVendors"]))
        lines.append(self._kv("Successful", session["successfulVendors"]))
        lines.append(self._kv("Failed", session["failedVendors"]))
        lines.append(self._kv("Items updated", session["totalItemsUpdated"]))
        lines.append("")

        results = session.get("results") or []
        if results:
            lines += ["---", "", "## Vendors", ""]
            lines += self._table(
                ["Vendor", "Status", "Items", "Duration (ms)", "Error"],
                [
                    [
                        r["vendorName"],
                        "ok" if r["success"] else "failed",
                        r["itemsUpdated"],
                        r["duration"],
                        r.get("error") or "",
                    ]
                    for r in results
                ],
            )
        return "\n".join(lines) + "\n"

    @staticmethod
    def _kv(key: str, value: Any) -> str:
        return f"- **{key}**: {value}"

    @staticmethod
    def _table(headers: List[str], rows: List[List[Any]]) -> List[str]:
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(str(cell)))

        out = ["| " + " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers)) + " |"]
        out.append("|" + "|".join("-" * (w + 2) for w in widths) + "|")
        for row in rows:
            out.append("| " + " | ".join(str(c).ljust(widths[i]) for i, c in enumerate(row)) + " |")
        out.append("")
        return out
