import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from colorama import Fore
from tqdm import tqdm

from ..errors import SourceDecodeError, UnwrapError
from .explorer_client import RawEntry

FALLBACK_NAME = "main.sol"


@dataclass
class Optimizer:
    enabled: bool = False
    runs: int = 0


@dataclass
class CompilerSettings:
    optimizer: Optional[Optimizer] = None
    output_selection: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)
    # opaque, explorer-specific; kept verbatim
    libraries: Any = None
    remappings: Any = None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"outputSelection": self.output_selection}
        if self.optimizer is not None:
            out["optimizer"] = {"enabled": self.optimizer.enabled, "runs": self.optimizer.runs}
        if self.libraries is not None:
            out["libraries"] = self.libraries
        if self.remappings is not None:
            out["remappings"] = self.remappings
        return out


@dataclass
class StandardJsonInput:
    language: str = ""
    sources: Dict[str, str] = field(default_factory=dict)
    settings: CompilerSettings = field(default_factory=CompilerSettings)


@dataclass
class SourceBundle:
    sources: Dict[str, str]
    document: Optional[StandardJsonInput] = None


def flat_bundle(source_code: str) -> SourceBundle:
    return SourceBundle({FALLBACK_NAME: source_code})


#JSON parsing helpers

def unwrap(source_code: str) -> str:
    """
    Drop the one extra pair of enclosing characters explorers put around
    standard-json-input (``{{...}}``). Positional: the characters are not inspected.
    """
    if len(source_code) < 2:
        raise UnwrapError(f"source code too short to unwrap ({len(source_code)} chars)")
    return source_code[1:-1]


def _parse_settings(raw: Any) -> CompilerSettings:
    if raw is None:
        return CompilerSettings()
    if not isinstance(raw, dict):
        raise SourceDecodeError("settings is not an object")

    optimizer = None
    opt = raw.get("optimizer")
    if isinstance(opt, dict):
        enabled = opt.get("enabled")
        runs = opt.get("runs")
        if enabled is not None and not isinstance(enabled, bool):
            raise SourceDecodeError(f"settings.optimizer.enabled is not a boolean: {enabled!r}")
        # bool is an int subclass
        if runs is not None and (isinstance(runs, bool) or not isinstance(runs, int)):
            raise SourceDecodeError(f"settings.optimizer.runs is not an integer: {runs!r}")
        optimizer = Optimizer(enabled=bool(enabled), runs=runs or 0)
    elif opt is not None:
        raise SourceDecodeError("settings.optimizer is not an object")

    selection = raw.get("outputSelection") or {}
    if not isinstance(selection, dict):
        raise SourceDecodeError("settings.outputSelection is not an object")

    return CompilerSettings(
        optimizer=optimizer,
        output_selection=selection,
        libraries=raw.get("libraries"),
        remappings=raw.get("remappings"),
    )


def parse_standard_json(text: str) -> StandardJsonInput:
    try:
        doc = json.loads(text)
    except ValueError as e:
        raise SourceDecodeError(f"not valid JSON: {e}") from e
    if not isinstance(doc, dict):
        raise SourceDecodeError("standard-json-input is not an object")

    sources: Dict[str, str] = {}
    raw_sources = doc.get("sources")
    if raw_sources is None:
        raw_sources = {}
    if not isinstance(raw_sources, dict):
        raise SourceDecodeError("sources is not an object")
    for path, meta in raw_sources.items():
        if not isinstance(meta, dict) or not isinstance(meta.get("content"), str):
            raise SourceDecodeError(f"source {path!r} has no string content")
        sources[path] = meta["content"]

    language = doc.get("language") or ""
    if not isinstance(language, str):
        raise SourceDecodeError("language is not a string")

    return StandardJsonInput(language=language, sources=sources, settings=_parse_settings(doc.get("settings")))


def parse_entry(entry: RawEntry) -> SourceBundle:
    document = parse_standard_json(unwrap(entry.source_code))
    if not document.sources:
        return SourceBundle({FALLBACK_NAME: entry.source_code}, document)
    return SourceBundle(document.sources, document)


# public API

def normalize(entries: List[RawEntry], per_entry_fallback: bool = False) -> List[SourceBundle]:
    if len(entries) == 1 and entries[0].is_one_source:
        return [flat_bundle(entries[0].source_code)]

    bundles: List[SourceBundle] = []
    for i, entry in enumerate(entries):
        try:
            bundles.append(parse_entry(entry))
        except SourceDecodeError as e:
            if per_entry_fallback:
                tqdm.write(Fore.YELLOW + f"[i] entry {i} is not standard-json ({e}); keeping it as {FALLBACK_NAME}")
                bundles.append(flat_bundle(entry.source_code))
                continue
            # one bad entry discards everything: keep only the first entry's raw text
            tqdm.write(Fore.YELLOW + f"[i] entry {i} is not standard-json ({e}); falling back to a flat {FALLBACK_NAME}")
            return [flat_bundle(entries[0].source_code)]

    return bundles
