from fastapi import FastAPI, HTTPException
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Bank Server", version="1.0.0")
# Support both local development and Docker
DATA_FILE = Path(os.environ.get("BANK_STUB_FILE", Path(__file__).resolve().parent / "bank_stub" / "sample_data.json"))


def load_data() -> dict:
    return json.loads(DATA_FILE.read_text())


def find_account(account_id: str) -> dict:
    for account in load_data()["accounts"]:
        if account["_id"] == account_id:
            return account
    raise HTTPException(status_code=404, detail="account not found")


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/accounts/{account_id}")
def get_account(account_id: str):
    return find_account(account_id)


@app.get("/accounts/{account_id}/purchases")
def get_purchases(account_id: str):
    find_account(account_id)
    return [p for p in load_data()["purchases"] if p["payer_id"] == account_id]


@app.get("/accounts/{account_id}/deposits")
def get_deposits(account_id: str):
    find_account(account_id)
    return [d for d in load_data()["deposits"] if d["payee_id"] == account_id]


@app.get("/customers/{customer_id}/accounts")
def get_customer_accounts(customer_id: str):
    accounts = [a for a in load_data()["accounts"] if a["customer_id"] == customer_id]
    if not accounts:
        raise HTTPException(status_code=404, detail="customer not found")
    return accounts


@app.get("/customers/{customer_id}/bills")
def get_bills(customer_id: str):
    return {"results": [b for b in load_data()["bills"] if b["customer_id"] == customer_id]}
