from string import Template

from answer_analyzer.config import EXAMINER_ROLE
from answer_analyzer.models import EvaluationRequest, NormalizedAnswer, Prompt

# The response parser looks for this label; keep both in sync
SCORE_LABEL = "Score:"

evaluation_prompt_template = Template(
    """You are ${examiner_role}. Please analyze the student's answer carefully.

Question: ${question_text}
Subject: ${subject}
Expected Key Points:
${expected_points}
Maximum Words: ${max_words}
Total Marks: ${marks}

Student's Answer (${answer_origin}, ${word_count} words):
${answer_text}

Task:
1. Evaluate the student's answer for accuracy, completeness, and relevance, checking it against each expected key point.
2. If the answer is incorrect or incomplete, provide the correct answer.
3. Highlight key strengths and areas for improvement.
4. Provide a final score out of ${marks}, with justification.

Organize your analysis under these headings:
CONTENT ANALYSIS, STRUCTURE AND PRESENTATION, STRENGTHS, AREAS FOR IMPROVEMENT, SPECIFIC SUGGESTIONS, CORRECT ANSWER.

Use clear, constructive language and keep formatting minimal.
The last line of your response must be exactly:
${score_label} <integer>/${marks}
"""
)


def format_expected_points(points) -> str:
    """Render the rubric as a numbered list so each point can be referred to."""
    items = [point.strip() for point in points if point and point.strip()]
    if not items:
        return "(none provided)"
    return "\n".join(f"{i}. {point}" for i, point in enumerate(items, start=1))


def build_evaluation_prompt(request: EvaluationRequest, answer: NormalizedAnswer,
                            examiner_role: str = EXAMINER_ROLE) -> Prompt:
    body = evaluation_prompt_template.substitute(
        examiner_role=examiner_role,
        question_text=request.question_text.strip(),
        subject=request.subject.strip(),
        expected_points=format_expected_points(request.expected_points),
        max_words=request.max_words if request.max_words > 0 else "No limit",
        marks=request.marks,
        answer_origin="extracted from image" if answer.source_was_image else "typed",
        word_count=answer.word_count,
        answer_text=answer.text,
        score_label=SCORE_LABEL,
    )
    return Prompt(body=body)
