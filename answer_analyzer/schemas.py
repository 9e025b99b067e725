from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional, Union

from answer_analyzer.models import EvaluationRequest, ImageData, TypedText


class AnalyzeAnswerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_text: str = Field(..., alias="questionText", description="The exam question being answered")
    subject: str = Field(..., description="Subject the question belongs to")
    expected_points: List[str] = Field(default_factory=list, alias="expectedPoints",
                                       description="Key points an ideal answer should cover")
    user_answer: Optional[str] = Field(None, alias="userAnswer", description="Typed answer text")
    answer_type: Literal["text", "image"] = Field("text", alias="answerType",
                                                  description="Which answer field is meaningful")
    image_data: Optional[str] = Field(None, alias="imageData",
                                      description="Answer photograph as a data URI or bare base64")
    max_words: int = Field(0, alias="maxWords", ge=0, description="Word limit, 0 for none")
    marks: int = Field(..., gt=0, description="Total marks for the question")

    def to_evaluation_request(self) -> EvaluationRequest:
        if self.answer_type == "image":
            source = ImageData(data=self.image_data or "")
        else:
            source = TypedText(text=self.user_answer or "")
        return EvaluationRequest(
            question_text=self.question_text,
            subject=self.subject,
            expected_points=tuple(self.expected_points),
            max_words=self.max_words,
            marks=self.marks,
            answer_source=source,
        )


class AnalyzeAnswerResponse(BaseModel):
    success: bool = Field(..., description="Whether the analysis completed")
    analysis: Optional[str] = Field(None, description="Cleaned critique, present on success")
    score: Optional[Union[int, str]] = Field(None, description='Score out of marks, or "Not provided"')
    error: Optional[str] = Field(None, description="Failure message, present on failure")
    timestamp: str = Field(..., description="ISO-8601 time the result was produced")
