from __future__ import annotations

import importlib.util
from dataclasses import dataclass
from importlib import metadata

from jimaku.config import Settings
from jimaku.errors import ConfigurationError


@dataclass(slots=True)
class DoctorCheck:
    name: str
    status: str
    detail: str


def _check_api_key(settings: Settings) -> DoctorCheck:
    try:
        settings.require_api_key()
    except ConfigurationError as exc:
        return DoctorCheck("API key", "fail", str(exc))
    return DoctorCheck("API key", "ok", "Gemini API key configured.")


def _check_sdk() -> DoctorCheck:
    try:
        spec = importlib.util.find_spec("google.genai")
    except ModuleNotFoundError:
        spec = None
    if spec is None:
        return DoctorCheck("google-genai", "fail", "google-genai is not installed. Install project dependencies first.")
    try:
        version = metadata.version("google-genai")
    except metadata.PackageNotFoundError:  # pragma: no cover - unusual installs
        version = "unknown version"
    return DoctorCheck("google-genai", "ok", f"Installed ({version})")


def _check_exports_dir(settings: Settings) -> DoctorCheck:
    try:
        settings.ensure_dirs()
        probe = settings.exports_dir / ".write-test"
        probe.write_text("", encoding="utf-8")
        probe.unlink()
    except OSError as exc:  # pragma: no cover - environment dependent
        return DoctorCheck("Exports dir", "fail", f"Cannot write to {settings.exports_dir}: {exc}")
    return DoctorCheck("Exports dir", "ok", f"Writable: {settings.exports_dir}")


def run_doctor(settings: Settings) -> list[DoctorCheck]:
    checks = [_check_api_key(settings), _check_sdk()]
    checks.append(DoctorCheck("Model", "ok" if settings.model.strip() else "fail", settings.model or "(empty)"))
    checks.append(_check_exports_dir(settings))
    return checks
