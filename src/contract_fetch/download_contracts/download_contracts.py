import re, sys, json
from pathlib import Path
from typing import Any, Dict, List, Optional
from tqdm import tqdm
from colorama import init, Fore, Style

from ..config import TARGETS, EXPLORERS, FetchConfig, load_config
from ..errors import ContractFetchError
from ..paths import safe_dest, target_root
from .explorer_client import DEFAULT_TIMEOUT, RawEntry, contract_url, fetch, redact
from .source_parser import SourceBundle, normalize

# initialize colorama
init(autoreset=True)


# unpaired surrogates outside the surrogateescape range (U+DC80-U+DCFF)
_LONE_SURROGATE_RE = re.compile("[\ud800-\udc7f\udd00-\udfff]")


def _write_file(dest: Path, content: str) -> None:
    # bytes, so content lands on disk exactly as the explorer sent it
    content = _LONE_SURROGATE_RE.sub("\ufffd", content)
    dest.write_bytes(content.encode("utf-8", "surrogateescape"))


def write_metadata(base_dir: Path, entries: List[RawEntry], bundles: List[SourceBundle],
                   written: List[Path], address: str = "") -> None:
    payload: Dict[str, Any] = {
        "address": address,
        "entries": [e.metadata() for e in entries if not e.is_one_source],
        "files": [p.relative_to(base_dir.resolve()).as_posix() for p in written],
    }
    (base_dir / "metadata.json").write_text(json.dumps(payload, indent=2), encoding="utf-8")

    settings = [b.document.settings.as_dict() for b in bundles if b.document is not None]
    if not settings:
        return
    (base_dir / "settings.json").write_text(
        json.dumps(settings[0] if len(settings) == 1 else settings, indent=2), encoding="utf-8"
    )

    remappings: List[str] = []
    for b in bundles:
        rms = b.document.settings.remappings if b.document is not None else None
        if isinstance(rms, list):
            remappings += [r for r in rms if isinstance(r, str) and r not in remappings]
    if remappings:
        (base_dir / "remappings.txt").write_text("\n".join(remappings) + "\n", encoding="utf-8")


def save_sources(bundles: List[SourceBundle], output_root: Path, target: str,
                 quiet: bool = False) -> List[Path]:
    root = target_root(output_root, target)
    root.mkdir(parents=True, exist_ok=True)

    items = [(path, content) for b in bundles for path, content in b.sources.items()]
    written: List[Path] = []
    with tqdm(total=len(items), desc="Writing", unit="file", dynamic_ncols=True, disable=quiet) as pbar:
        for path, content in items:
            pbar.set_postfix(file=Path(path).name)
            dest = safe_dest(root, path)
            _write_file(dest, content)
            written.append(dest)
            pbar.update(1)
    return written


def run(cfg: FetchConfig, metadata: bool = False, per_entry_fallback: bool = False,
        timeout: float = DEFAULT_TIMEOUT, quiet: bool = False) -> List[Path]:
    url = contract_url(cfg.endpoint, cfg.address, cfg.api_key)
    tqdm.write(f"[+] Fetching {cfg.target} ({cfg.chain} {cfg.address}) from {redact(url)}")
    entries = fetch(cfg.endpoint, cfg.address, cfg.api_key, timeout=timeout)

    if len(entries) == 1 and entries[0].is_one_source:
        tqdm.write(Fore.YELLOW + "[i] response is not an explorer envelope; saving the body as a single source")
    elif not entries:
        tqdm.write(Fore.YELLOW + f"[i] explorer returned no source entries for {cfg.address}")

    bundles = normalize(entries, per_entry_fallback=per_entry_fallback)
    written = save_sources(bundles, cfg.output_root, cfg.target, quiet=quiet)

    if metadata:
        write_metadata(target_root(cfg.output_root, cfg.target), entries, bundles, written, cfg.address)

    tqdm.write(Fore.GREEN + f"[✓] wrote {len(written)} file(s) for {cfg.target} to "
               f"{target_root(cfg.output_root, cfg.target)}")
    return written


def list_targets() -> None:
    for name, t in sorted(TARGETS.items()):
        print(f"{name:<18} {t.chain:<9} {t.address}")
    print(f"{Fore.YELLOW}chains: {', '.join(sorted(EXPLORERS))}{Style.RESET_ALL}")


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Download verified contract sources from a block explorer")
    parser.add_argument("target", nargs="?", help="Registered target name (see --list)")
    parser.add_argument("--address", help="Contract address (0x...) instead of a registered target")
    parser.add_argument("--chain", help="Chain of --address (default: ethereum)")
    parser.add_argument("--output-dir", default=None, help="Output root (default: ./contracts)")
    parser.add_argument("--metadata", action="store_true",
                        help="Also write metadata.json / settings.json / remappings.txt")
    parser.add_argument("--per-entry-fallback", action="store_true",
                        help="Only replace unparseable entries with main.sol instead of the whole result")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="HTTP timeout in seconds")
    parser.add_argument("--quiet", action="store_true", help="Hide the progress bar")
    parser.add_argument("--list", action="store_true", help="List registered targets and exit")
    args = parser.parse_args(argv)

    if args.list:
        list_targets()
        return 0

    try:
        cfg = load_config(target=args.target, address=args.address, chain=args.chain,
                          output_root=args.output_dir)
        run(cfg, metadata=args.metadata, per_entry_fallback=args.per_entry_fallback,
            timeout=args.timeout, quiet=args.quiet)
    except ContractFetchError as e:
        print(Fore.RED + f"[!] {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(Fore.RED + f"[!] writing sources failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
