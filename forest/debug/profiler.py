from __future__ import annotations

import json
import math
import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator


@dataclass
class _TickState:
    kind: str
    start_time: float
    context: dict[str, Any] = field(default_factory=dict)
    section_totals_ms: dict[str, float] = field(default_factory=dict)


class RuntimeProfiler:
    """Per-tick timing with named sections and a slow-tick log.

    One tick is open at a time (``begin_tick`` / ``end_tick``); sections
    opened while a tick is active are also summed into that tick so slow
    ticks can be broken down afterwards.
    """

    REPORT_PREFIX = "tick_report"

    def __init__(self, enabled: bool = True, slow_tick_ms: float = 8.0, max_slow_ticks: int = 200) -> None:
        self.enabled = enabled
        self.slow_tick_ms = slow_tick_ms
        self.max_slow_ticks = max_slow_ticks
        self.section_samples_ms: dict[str, list[float]] = defaultdict(list)
        self.tick_samples_ms: dict[str, list[float]] = defaultdict(list)
        self.slow_ticks: list[dict[str, Any]] = []
        self._active: _TickState | None = None

    def begin_tick(self, kind: str, context: dict[str, Any] | None = None) -> None:
        if not self.enabled:
            return
        if self._active is not None:
            self.end_tick({"warning": "tick_auto_closed"})
        self._active = _TickState(kind=kind, start_time=time.perf_counter(), context=dict(context or {}))

    def end_tick(self, extra_context: dict[str, Any] | None = None) -> None:
        if not self.enabled or self._active is None:
            return
        tick, self._active = self._active, None

        total_ms = (time.perf_counter() - tick.start_time) * 1000.0
        self.tick_samples_ms[tick.kind].append(total_ms)
        if total_ms < self.slow_tick_ms:
            return

        context = dict(tick.context)
        context.update(extra_context or {})
        sections = sorted(tick.section_totals_ms.items(), key=lambda item: item[1], reverse=True)
        self.slow_ticks.append(
            {
                "kind": tick.kind,
                "total_ms": total_ms,
                "context": context,
                "sections_ms": dict(sections),
            }
        )
        del self.slow_ticks[: -self.max_slow_ticks]

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        if not self.enabled:
            yield
            return
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record_section_ms(name, (time.perf_counter() - start) * 1000.0)

    def record_section_ms(self, name: str, duration_ms: float) -> None:
        if not self.enabled:
            return
        self.section_samples_ms[name].append(duration_ms)
        if self._active is not None:
            totals = self._active.section_totals_ms
            totals[name] = totals.get(name, 0.0) + duration_ms

    @staticmethod
    def _percentile(values: list[float], p: float) -> float:
        if not values:
            return 0.0
        ordered = sorted(values)
        rank = max(0, min(len(ordered) - 1, int(math.ceil(len(ordered) * p)) - 1))
        return ordered[rank]

    def stats(self, values: list[float]) -> dict[str, float]:
        if not values:
            return {"count": 0.0, "avg_ms": 0.0, "p95_ms": 0.0, "max_ms": 0.0}
        return {
            "count": float(len(values)),
            "avg_ms": sum(values) / len(values),
            "p95_ms": self._percentile(values, 0.95),
            "max_ms": max(values),
        }

    def summary(self) -> dict[str, Any]:
        return {
            "generated_at": time.strftime("%Y-%m-%d %H:%M:%S"),
            "slow_tick_threshold_ms": self.slow_tick_ms,
            "tick_stats_ms": {name: self.stats(s) for name, s in self.tick_samples_ms.items()},
            "section_stats_ms": {name: self.stats(s) for name, s in self.section_samples_ms.items()},
            "slow_ticks": self.slow_ticks,
        }

    def write_report(self, output_dir: str | Path = "profiling") -> tuple[Path, Path] | None:
        """Write ``tick_report_<stamp>.{txt,json}`` plus ``*_latest`` copies."""
        if not self.enabled:
            return None

        out_dir = Path(output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        stamp = time.strftime("%Y%m%d_%H%M%S")
        txt_path = out_dir / f"{self.REPORT_PREFIX}_{stamp}.txt"
        json_path = out_dir / f"{self.REPORT_PREFIX}_{stamp}.json"

        report = self.summary()
        json_text = json.dumps(report, indent=2)

        lines = [
            "Forest Explorer Tick Report",
            f"Generated: {report['generated_at']}",
            f"Slow tick threshold: {self.slow_tick_ms:.2f} ms",
        ]
        for title, key in (("Ticks", "tick_stats_ms"), ("Sections", "section_stats_ms")):
            lines += ["", title]
            ranked = sorted(report[key].items(), key=lambda item: item[1]["p95_ms"], reverse=True)
            for name, s in ranked:
                lines.append(
                    f"- {name}: count={int(s['count'])} avg={s['avg_ms']:.3f}ms "
                    f"p95={s['p95_ms']:.3f}ms max={s['max_ms']:.3f}ms"
                )
        lines += ["", f"Slow ticks ({len(self.slow_ticks)})"]
        slowest = sorted(self.slow_ticks, key=lambda f: f["total_ms"], reverse=True)[:20]
        for n, tick in enumerate(slowest, start=1):
            lines.append(f"{n}. {tick['kind']} total={tick['total_ms']:.2f}ms context={tick['context']}")
            lines += [f"   - {name}: {ms:.3f}ms" for name, ms in list(tick["sections_ms"].items())[:5]]
        text = "\n".join(lines) + "\n"

        for path, content in (
            (txt_path, text),
            (json_path, json_text),
            (out_dir / f"{self.REPORT_PREFIX}_latest.txt", text),
            (out_dir / f"{self.REPORT_PREFIX}_latest.json", json_text),
        ):
            path.write_text(content, encoding="utf-8")
        return txt_path, json_path
