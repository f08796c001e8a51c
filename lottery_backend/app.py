from __future__ import annotations

import sys
import traceback
from contextlib import asynccontextmanager
from typing import Any, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lottery_backend.config import get_cors_origins, get_host, get_port
from lottery_backend.db import (
    init_db,
    insert_past_result,
    insert_past_results,
    get_past_results,
    get_predictions,
    get_patterns,
)
from lottery_backend.parse import parse_numbers, validate_draw, parse_results_csv

# Load environment variables
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    print("[STARTUP] Database setup complete")
    sys.stdout.flush()
    yield


app = FastAPI(title="Lottery Predictor", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _server_error(tag: str, message: str) -> JSONResponse:
    print(f"[{tag} ERROR] {traceback.format_exc()}")
    sys.stdout.flush()
    return _error(500, message)


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    # Bodies that are not JSON objects never reach the routes
    print(f"[VALIDATION] {request.url.path}: {exc.errors()}")
    return _error(400, "Invalid request body")


def _refresh_patterns() -> None:
    """Re-detect patterns after new results. Stored results stand even if this fails."""
    from lottery_backend.patterns import detect_patterns

    try:
        detect_patterns()
    except Exception:
        print(f"[PATTERNS ERROR] {traceback.format_exc()}")
        sys.stdout.flush()


@app.get("/api/health")
def health():
    return {"ok": True}


# ===== PAST RESULTS =====

class StoreRequest(BaseModel):
    numbers: Optional[Any] = None
    bonusNumber: Optional[Any] = None


class CSVImportRequest(BaseModel):
    csv_content: Optional[Any] = None


@app.post("/api/store")
def store_past_result(request: StoreRequest):
    """
    Store a past draw.
    numbers may be a list of 7 integers or a string like "3,7,12,19,25,33,41".
    Patterns are re-detected after every insert.
    """
    if not request.numbers or not request.bonusNumber:
        return _error(400, "Missing required fields")

    try:
        numbers, bonus = validate_draw(parse_numbers(request.numbers), request.bonusNumber)
    except ValueError as e:
        return _error(400, str(e))

    try:
        result_id = insert_past_result(numbers, bonus)
        print(f"[STORE] Saved past result {result_id}: {numbers} + {bonus}")
    except Exception:
        return _server_error("STORE", "Failed to store past result")

    _refresh_patterns()
    return {
        "success": True,
        "id": result_id,
        "message": "Past lottery result saved successfully",
    }


@app.post("/api/import")
def import_past_results(request: CSVImportRequest):
    """
    Bulk-import past draws from CSV content.

    CSV Format:
    n1,n2,n3,n4,n5,n6,n7,bonus
    3,7,12,19,25,33,41,8

    Invalid lines are skipped and counted.
    """
    if not isinstance(request.csv_content, str):
        return _error(400, "csv_content must be a string")

    parsed = parse_results_csv(request.csv_content)
    if not parsed["draws"]:
        return _error(400, "No valid draws parsed from CSV")

    try:
        inserted = insert_past_results(parsed["draws"])
        print(f"[IMPORT] Inserted {inserted} past results, skipped {parsed['skipped']}")
    except Exception:
        return _server_error("IMPORT", "Failed to import past results")

    _refresh_patterns()
    return {"success": True, "inserted": inserted, "skipped": parsed["skipped"]}


@app.get("/api/past-results")
def past_results():
    try:
        return get_past_results()
    except Exception:
        return _server_error("PAST-RESULTS", "Failed to fetch past results")


# ===== PREDICTIONS =====

@app.get("/api/predict")
def predict(model: str = "neural"):
    """
    Generate and store a prediction.
    model: 'random', 'ml' (frequency) or 'neural' (recency weighted, default).

    For entertainment only. Every number has equal odds in each draw.
    """
    from lottery_backend.predictions import generate_prediction

    try:
        prediction = generate_prediction(model)
        print(f"[PREDICT] {prediction['source']}: {prediction['numbers']} + {prediction['bonusNumber']}")
        return {
            "prediction": prediction,
            "message": "Prediction generated successfully",
        }
    except Exception:
        return _server_error("PREDICT", "Failed to generate prediction")


@app.get("/api/predictions")
def predictions():
    try:
        return get_predictions()
    except Exception:
        return _server_error("PREDICTIONS", "Failed to fetch predictions")


@app.get("/api/accuracy")
def accuracy():
    from lottery_backend.accuracy import calculate_accuracy

    try:
        return calculate_accuracy()
    except Exception:
        return _server_error("ACCURACY", "Failed to calculate accuracy")


@app.get("/api/accuracy/history")
def accuracy_history(limit: int = 50):
    from lottery_backend.accuracy import accuracy_history as history

    try:
        return history(limit)
    except Exception:
        return _server_error("ACCURACY", "Failed to fetch accuracy history")


# ===== PATTERNS =====

class PatternRequest(BaseModel):
    pattern_description: Optional[Any] = None
    confidence: Optional[Any] = None


@app.get("/api/patterns")
def patterns():
    try:
        return get_patterns()
    except Exception:
        return _server_error("PATTERNS", "Failed to fetch patterns")


@app.post("/api/patterns")
def create_pattern(request: PatternRequest):
    from lottery_backend.patterns import add_pattern

    if request.pattern_description is None or request.confidence is None:
        return _error(400, "Missing required fields")

    try:
        return add_pattern(request.pattern_description, request.confidence)
    except ValueError as e:
        return _error(400, str(e))
    except Exception:
        return _server_error("PATTERNS", "Failed to save pattern")


# ===== CHAT =====

class ChatRequest(BaseModel):
    message: Optional[Any] = None


@app.post("/api/chat")
def chat(request: ChatRequest):
    from lottery_backend.chatbot import generate_chat_response

    if not request.message:
        return _error(400, "Message is required")
    if not isinstance(request.message, str):
        return _error(400, "Message must be a string")

    try:
        return {"response": generate_chat_response(request.message)}
    except Exception:
        return _server_error("CHAT", "Failed to generate chat response")


def main():
    import uvicorn

    uvicorn.run(app, host=get_host(), port=get_port())


if __name__ == "__main__":
    main()
