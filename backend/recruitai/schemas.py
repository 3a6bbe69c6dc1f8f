from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core import config


class SessionCreateRequest(BaseModel):
    max_tab_violations: int = Field(default=config.MAX_TAB_VIOLATIONS, ge=1)
    max_attention_violations: int = Field(default=config.MAX_ATTENTION_VIOLATIONS, ge=1)
    max_camera_violations: int = Field(default=config.MAX_CAMERA_VIOLATIONS, ge=1)
    camera_grace_frames: int = Field(default=1, ge=1)
    eye_contact_threshold_px: float | None = Field(default=None, gt=0)


class FrameRequest(BaseModel):
    # one [x, y(, z)] point per landmark index; malformed frames are skipped
    landmarks: list[Any] | None = None


class FaceCheckRequest(BaseModel):
    # None = the detector call failed on the client
    detections: list[Any] | None = None


class VisibilityRequest(BaseModel):
    hidden: bool


class HesitationOverride(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filler_count: int = Field(default=0, ge=0, alias="fillerCount")
    hesitation_score: int | None = Field(default=None, ge=0, le=100, alias="hesitationScore")


class MetricsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transcript: str = ""
    eye_contact_percent: float | None = Field(default=0, alias="eyeContactPercent")
    hesitation_info: HesitationOverride | None = Field(default=None, alias="hesitationInfo")

    def extra(self) -> dict[str, Any] | None:
        if self.hesitation_info is None:
            return None
        return {"hesitation_info": self.hesitation_info.model_dump()}


class InterviewSubmitRequest(MetricsRequest):
    interview_id: str = Field(alias="interviewId")
    video_url: str | None = Field(default=None, alias="videoUrl")
    duration_sec: float = Field(default=0, ge=0, alias="durationSec")


class AnswerItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(alias="questionId")
    selected_index: int | None = Field(default=None, alias="selectedIndex")


class ViolationIncrements(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    attention_increment: int = Field(default=0, ge=0, alias="attentionIncrement")
    tab_switch_increment: int = Field(default=0, ge=0, alias="tabSwitchIncrement")


class MockTestSubmitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    attempt_id: str = Field(alias="attemptId")
    answers: list[AnswerItem]
    violations: ViolationIncrements | None = None
