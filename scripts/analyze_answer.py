"""
Command-line runner for the answer analysis pipeline.
Analyze a typed answer file or an answer photograph and print the result JSON.
"""
import sys
import json
import asyncio
import logging
import argparse
from pathlib import Path

# Add the parent directory to path so we can import from answer_analyzer
sys.path.insert(0, str(Path(__file__).parent.parent))

from answer_analyzer.models import EvaluationRequest, ImageData, TypedText
from answer_analyzer.services.analysis_service import AnswerAnalysisService
from answer_analyzer.services.llm_eval import GeminiReasoningEngine
from answer_analyzer.services.ocr_service import TesseractOcrEngine

# Set up logging
logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def build_request(args) -> EvaluationRequest:
    if args.image:
        source = ImageData(data=Path(args.image).read_bytes())
    else:
        source = TypedText(text=Path(args.answer_file).read_text(encoding="utf-8"))

    return EvaluationRequest(
        question_text=args.question,
        subject=args.subject,
        expected_points=tuple(args.point or ()),
        max_words=args.max_words,
        marks=args.marks,
        answer_source=source,
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Analyze an exam answer")
    parser.add_argument("--question", required=True, help="Question text")
    parser.add_argument("--subject", required=True, help="Subject of the question")
    parser.add_argument("--point", action="append", help="Expected key point (repeatable)")
    parser.add_argument("--max-words", type=int, default=0, help="Word limit, 0 for none")
    parser.add_argument("--marks", type=int, default=10, help="Total marks")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--answer-file", help="Path to a text file with the typed answer")
    source.add_argument("--image", help="Path to a photograph of the handwritten answer")

    args = parser.parse_args(argv)

    answer_path = args.image or args.answer_file
    if not Path(answer_path).exists():
        logger.error(f"Answer file not found: {answer_path}")
        return 1

    service = AnswerAnalysisService(
        ocr_engine=TesseractOcrEngine(),
        reasoning_engine=GeminiReasoningEngine(),
    )
    result = asyncio.run(service.run_with_retry(build_request(args)))

    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 2


if __name__ == "__main__":
    sys.exit(main())
