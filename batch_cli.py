# batch_cli.py
import argparse, json, csv, sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from dotenv import load_dotenv

from radar.core.analyze import AnalyzerError, analyze_contract
from radar.core.models import SCORING_KEYS
from radar.utils.ratelimit import set_default_qps

FIELDNAMES = (["chain", "address", "contract_name", "address_type", "is_verified", "score", "label"]
              + [k.value for k in SCORING_KEYS] + ["error"])


def load_addresses(path: str) -> list[str]:
    p = Path(path)
    if not p.exists():
        print(f"[BATCH] ❌ Input file not found: {path}", file=sys.stderr)
        sys.exit(1)
    addrs = []
    with p.open() as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            addrs.append(s)
    print(f"[BATCH] Loaded {len(addrs)} addresses")
    return addrs


def flatten_result(res: dict) -> dict:
    """One CSV row: score/label plus STATUS(penalty) per scoring indicator."""
    meta = res.get("metadata") or {}
    score = res.get("riskScore") or {}
    findings = res.get("findings") or {}
    row = {
        "chain": res.get("chain"),
        "address": res.get("address"),
        "contract_name": meta.get("contractName") or "",
        "address_type": meta.get("addressType") or "",
        "is_verified": meta.get("isVerified"),
        "score": score.get("score"),
        "label": score.get("label"),
        "error": "",
    }
    for key in SCORING_KEYS:
        f = findings.get(key.value) or {}
        row[key.value] = f"{f.get('status', '')}({f.get('penalty', '')})" if f else ""
    return row


def error_row(chain: str, addr: str, err: str) -> dict:
    row = {k: "" for k in FIELDNAMES}
    row.update({"chain": chain, "address": addr, "error": err})
    return row


def main(argv=None):
    load_dotenv()
    ap = argparse.ArgumentParser(description="Contract Risk Radar - Batch Scanner")
    ap.add_argument("--chain", default="ethereum", help="Chain to scan")
    ap.add_argument("--infile", required=True, help="Path to text file with one address per line")
    ap.add_argument("--out-csv", default="batch_scan.csv", help="CSV output path")
    ap.add_argument("--out-json", default="batch_scan.json", help="JSON output path")
    ap.add_argument("--concurrency", type=int, default=2, help="Parallel scans (1–3 safe on free plans)")
    ap.add_argument("--explorer-qps", type=float, default=4.0, help="Max req/s to the explorer API")
    args = ap.parse_args(argv)

    set_default_qps(args.explorer_qps)
    addresses = load_addresses(args.infile)
    print(f"[BATCH] Scanning {len(addresses)} addresses on {args.chain} with concurrency={args.concurrency}")

    def work(addr: str):
        try:
            res = analyze_contract(args.chain, addr)
            return flatten_result(res), res
        except AnalyzerError as e:
            print(f"[BATCH][WORK] FAIL {addr} -> {e.message}")
            return error_row(args.chain, addr, e.message), None
        except Exception as e:
            print(f"[BATCH][WORK] FAIL {addr} -> {e}")
            return error_row(args.chain, addr, str(e)), None

    rows, json_out = [], []
    with ThreadPoolExecutor(max_workers=max(1, args.concurrency)) as ex:
        futs = {ex.submit(work, a): a for a in addresses}
        for fut in as_completed(futs):
            row, res = fut.result()
            rows.append(row)
            json_out.append(res if res else {"chain": args.chain, "address": row["address"], "error": row["error"]})
            print(f"[BATCH] Result {row['address']} -> score={row['score']} label={row['label']}"
                  f"{' (err: ' + row['error'] + ')' if row['error'] else ''}")

    with open(args.out_csv, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=FIELDNAMES)
        w.writeheader()
        w.writerows(rows)
    print(f"[BATCH] Wrote CSV -> {args.out_csv}")

    with open(args.out_json, "w") as f:
        json.dump(json_out, f, indent=2)
    print(f"[BATCH] Wrote JSON -> {args.out_json}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
