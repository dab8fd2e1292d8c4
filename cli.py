# cli.py
import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from radar.core.analyze import AnalyzerError, analyze_contract
from radar.core.evaluate import evaluate
from radar.core.models import ExplorerInfo
from radar.utils.explorer import parse_abi

STATUS_ICON = {"PASS": "✅", "WARN": "⚠️ ", "FAIL": "🚨"}
LABEL_LINE = {"High": "❗ HIGH RISK", "Medium": "⚠️  MEDIUM RISK", "Low": "✅ LOW RISK"}


def _read_text(path: str) -> str:
    p = Path(path)
    if not p.exists():
        print(f"[CLI] ❌ File not found: {path}", file=sys.stderr)
        sys.exit(1)
    return p.read_text().strip()


def run_offline(args) -> dict:
    """Score local files without touching RPC or the explorer."""
    bytecode = _read_text(args.bytecode_file) if args.bytecode_file else None
    abi = parse_abi(_read_text(args.abi_file)) if args.abi_file else None
    if args.abi_file and abi is None:
        print("[CLI] ABI file is not a valid JSON ABI; treating ABI as unavailable.", file=sys.stderr)
    explorer = None
    if args.explorer_file:
        try:
            explorer = ExplorerInfo.model_validate(json.loads(_read_text(args.explorer_file)))
        except (json.JSONDecodeError, ValidationError) as e:
            print(f"[CLI] Explorer file is not a valid explorer record ({e.__class__.__name__}); "
                  "treating explorer info as unavailable.", file=sys.stderr)
    result = evaluate(bytecode, abi, explorer).to_dict()
    return {
        "riskScore": {"score": result["score"], "label": result["label"]},
        "summary": {"keyFindings": result["keyFindings"], "goodSigns": result["goodSigns"]},
        "findings": result["findings"],
    }


def print_report(result: dict) -> None:
    if result.get("address"):
        print(f"Chain={result.get('chain','?')}  Address={result['address']}")
    meta = result.get("metadata") or {}
    if meta.get("contractName"):
        print(f"Contract: {meta['contractName']} ({meta.get('addressType','?')})")

    for f in (result.get("findings") or {}).values():
        icon = STATUS_ICON.get(f.get("status"), "?")
        print(f"{icon} {f.get('title')}: {f.get('reason')} (-{f.get('penalty', 0)})")

    patterns = result.get("sourcePatterns") or []
    if patterns:
        print("🔎 Source patterns: " + ", ".join(p["pattern"] for p in patterns))

    score = result.get("riskScore") or {}
    print(f"🧮 Final Score: {score.get('score','?')}/100")
    print(LABEL_LINE.get(score.get("label"), f"❓ Unknown label: {score.get('label')}"))


def main(argv=None):
    load_dotenv()
    p = argparse.ArgumentParser(description="Contract Risk Radar CLI")
    p.add_argument("--chain", default="ethereum", help="ethereum|base|polygon|bsc|scroll|arbitrum")
    p.add_argument("--address", help="Contract address")
    p.add_argument("--type", default="auto", choices=["auto", "token", "contract"], help="Address kind")
    p.add_argument("--bytecode-file", help="Offline: file with hex bytecode")
    p.add_argument("--abi-file", help="Offline: file with JSON ABI")
    p.add_argument("--explorer-file", help="Offline: JSON explorer info (isVerified, proxy, proxyAdmin, ...)")
    p.add_argument("--json", action="store_true", help="Print JSON only")
    args = p.parse_args(argv)

    offline = bool(args.bytecode_file or args.abi_file or args.explorer_file)
    if not offline and not args.address:
        p.error("--address is required unless scoring local files")

    if offline:
        result = run_offline(args)
    else:
        print(f"[CLI] ENV presence -> ETHERSCAN_API_KEY: {'yes' if os.getenv('ETHERSCAN_API_KEY') else 'no'}")
        try:
            result = analyze_contract(args.chain, args.address, args.type)
        except AnalyzerError as e:
            print(f"[CLI] analyze_contract FAIL ({e.status_code}) -> {e.message}", file=sys.stderr)
            return 1

    if args.json:
        print(json.dumps(result, indent=2, default=str))
    else:
        print_report(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
