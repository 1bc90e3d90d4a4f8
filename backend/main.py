"""
FastAPI preview service for ICS statement parsing.

Parses an uploaded statement and returns the result for review. Nothing is
persisted here.
"""
from fastapi import FastAPI, File, UploadFile, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from icsparser import parse_statement, detect_template, StatementParseError
from icsparser.core.detectors import TemplateDetector

app = FastAPI(title="ICS Statement Parser", version="1.0.0")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],  # Vite and other dev servers
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def _read_pdf(file: UploadFile) -> bytes:
    if not file.filename or not file.filename.lower().endswith('.pdf'):
        raise HTTPException(status_code=400, detail="File must be a PDF")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    return content


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "ICS Statement Parser API", "status": "healthy"}


@app.post("/parse")
async def parse_pdf(file: UploadFile = File(...), template: str = "auto"):
    """
    Parse an uploaded statement PDF.

    Args:
        file: Uploaded PDF file
        template: Template ID to use, or "auto" to detect it

    Returns:
        Parse result with a short summary
    """
    content = await _read_pdf(file)
    logger.info(f"Processing PDF: {file.filename}")

    try:
        result = parse_statement(content, template_id=None if template == "auto" else template)
    except StatementParseError as e:
        logger.warning(f"Could not parse {file.filename}: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Error parsing PDF: {e}")
        raise HTTPException(status_code=500, detail=f"Error parsing PDF: {str(e)}")

    logger.info(f"Successfully parsed PDF: {len(result.transactions)} transactions found")

    return JSONResponse(content={
        "success": True,
        "data": result.model_dump(mode="json"),
        "summary": {
            "statement_id": result.statement_id,
            "transactions_count": len(result.transactions),
            "debit_total": float(result.debit_total),
            "total_new_expenses": float(result.header.total_new_expenses),
            "warnings_count": len(result.warnings)
        }
    })


@app.post("/detect-template")
async def detect_pdf_template(file: UploadFile = File(...)):
    """
    Detect which template matches a PDF file.

    Args:
        file: Uploaded PDF file

    Returns:
        Detected template ID
    """
    content = await _read_pdf(file)

    try:
        template = detect_template(content)
    except Exception as e:
        logger.error(f"Error detecting template: {e}")
        raise HTTPException(status_code=500, detail=f"Error detecting template: {str(e)}")

    if not template:
        raise HTTPException(status_code=422, detail="No matching template found")

    return JSONResponse(content={
        "success": True,
        "template": template
    })


@app.get("/templates")
async def list_templates():
    """List all available templates."""
    detector = TemplateDetector()
    return JSONResponse(content={
        "success": True,
        "templates": [
            {
                "id": template_id,
                "bank": config.get("bank", ""),
                "currency": config.get("currency", "EUR")
            }
            for template_id, config in detector.templates.items()
        ]
    })


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
