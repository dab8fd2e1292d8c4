# api.py
import os
from typing import List, Optional

print("[API] Booting FastAPI...")

from fastapi import FastAPI, HTTPException, Query, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
from dotenv import load_dotenv
from concurrent.futures import ThreadPoolExecutor, as_completed

_loaded = load_dotenv()
print(f"[API] .env loaded: {_loaded}")
print(f"[API] ENV presence -> ETHERSCAN_API_KEY: {'yes' if os.getenv('ETHERSCAN_API_KEY') else 'no'}, "
      f"ALCHEMY_API_KEY: {'yes' if os.getenv('ALCHEMY_API_KEY') else 'no'}")

from radar.core.analyze import AnalyzerError, analyze_contract
from radar.core.evaluate import evaluate
from radar.core.models import ExplorerInfo
from radar.utils.ratelimit import set_default_qps

app = FastAPI(title="Contract Risk Radar API", version="0.4.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api = APIRouter(prefix="/api")


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chain: str = "ethereum"
    address: str = ""
    address_type: Optional[str] = Field(default=None, alias="addressType")


class EvaluateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bytecode: Optional[str] = None
    abi: Optional[List[dict]] = None
    explorer_info: Optional[ExplorerInfo] = Field(default=None, alias="explorerInfo")


class BatchJob(BaseModel):
    chain: str = "ethereum"
    addresses: List[str]
    concurrency: int = 2
    explorer_qps: float = 4.0


def _run_analysis(chain: str, address: str, address_type: Optional[str] = None) -> dict:
    try:
        out = analyze_contract(chain, address, address_type)
    except AnalyzerError as e:
        print(f"[API] AnalyzerError address={address} chain={chain} -> {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except ValueError as ve:
        print(f"[API] ValueError address={address} chain={chain} -> {ve}")
        raise HTTPException(status_code=400, detail=str(ve))
    print(f"[API] OK address={address} chain={chain} score={out['riskScore']['score']}")
    return out


@api.get("/health")
def health():
    return {"ok": True}


@api.get("/risk/{address}")
def risk(address: str, chain: str = Query(default="ethereum"),
         address_type: Optional[str] = Query(default=None, alias="type")):
    print(f"[API] GET /api/risk/{address}?chain={chain}")
    return _run_analysis(chain, address, address_type)


@api.post("/analyze")
def analyze(req: AnalyzeRequest):
    print(f"[API] POST /api/analyze chain={req.chain} address={req.address}")
    return _run_analysis(req.chain, req.address, req.address_type)


@api.post("/evaluate")
def evaluate_snapshot(req: EvaluateRequest):
    """Score a caller-supplied snapshot; no RPC or explorer traffic."""
    result = evaluate(req.bytecode, req.abi, req.explorer_info)
    print(f"[API] POST /api/evaluate score={result.score} label={result.label.value}")
    return result.to_dict()


@api.post("/batch")
def batch(job: BatchJob):
    print(f"[API] POST /api/batch -> chain={job.chain} count={len(job.addresses)} conc={job.concurrency}")
    if not job.addresses:
        raise HTTPException(status_code=400, detail="addresses list is empty")

    set_default_qps(job.explorer_qps)

    def work(addr: str):
        try:
            return analyze_contract(job.chain, addr)
        except AnalyzerError as e:
            print(f"[API][WORK] FAIL {addr} -> {e.message}")
            return {"chain": job.chain, "address": addr, "error": e.message}
        except Exception as e:
            print(f"[API][WORK] FAIL {addr} -> {e}")
            return {"chain": job.chain, "address": addr, "error": str(e)}

    out = []
    with ThreadPoolExecutor(max_workers=max(1, min(8, job.concurrency))) as ex:
        futs = {ex.submit(work, a): a for a in job.addresses}
        for fut in as_completed(futs):
            out.append(fut.result())
    print(f"[API] /batch completed -> {len(out)} results")
    return {"count": len(out), "results": out}


app.include_router(api)
