from io import BytesIO

import pytest
from PIL import Image

from creative_store.clients.storage import UploadResult
from creative_store.config import Settings
from creative_store.models import Brief, Draft, ResearchResult


def make_png(size=(64, 48), color=(200, 30, 30)) -> bytes:
    output = BytesIO()
    Image.new("RGB", size, color).save(output, format="PNG")
    return output.getvalue()


class FakeLLM:
    """Stands in for LLMClient; records every call."""

    def __init__(self, research=None, extracted=None, research_error=None, extract_error=None):
        self.research_result = research or ResearchResult(text="Findings.", step_count=2, sources=[])
        self.extracted = extracted
        self.research_error = research_error
        self.extract_error = extract_error
        self.research_calls = []
        self.extract_calls = []

    def research(self, system_prompt, user_message, max_steps=8, web_search=True, label="RESEARCH"):
        self.research_calls.append(user_message)
        if self.research_error:
            raise self.research_error
        return self.research_result

    def extract(self, system_prompt, user_message, schema, label="EXTRACTION"):
        self.extract_calls.append(user_message)
        if self.extract_error:
            raise self.extract_error
        return self.extracted


class FakeImageClient:
    """Stands in for ImageClient; returns real PNG bytes."""

    def __init__(self, generate_error=None, edit_error=None):
        self.generate_error = generate_error
        self.edit_error = edit_error
        self.generate_calls = []
        self.edit_calls = []

    @property
    def call_count(self):
        return len(self.generate_calls) + len(self.edit_calls)

    def generate(self, prompt, aspect_ratio, images=None):
        self.generate_calls.append({"prompt": prompt, "aspect_ratio": aspect_ratio, "images": images})
        if self.generate_error:
            raise self.generate_error
        return make_png()

    def edit(self, prompt, images):
        self.edit_calls.append({"prompt": prompt, "images": images})
        if self.edit_error:
            raise self.edit_error
        return make_png(color=(30, 30, 200))


class FakeStorage:
    def __init__(self):
        self.uploads = []

    def upload_image(self, key, data, content_type="image/png"):
        self.uploads.append({"key": key, "data": data, "content_type": content_type})
        return UploadResult(url=f"https://test-bucket.s3.us-east-1.amazonaws.com/{key}", key=key)


class FakeRecords:
    def __init__(self, briefs=None):
        self.briefs = {b.id: b for b in briefs or []}
        self.drafts = []

    def get_brief(self, brief_id):
        return self.briefs.get(brief_id)

    def create_brief(self, project_id, intent_text, brief_json, constraints):
        brief = Brief(
            id=f"brief-{len(self.briefs) + 1}",
            project_id=project_id,
            intent_text=intent_text,
            brief_json=brief_json,
            constraints=constraints,
        )
        self.briefs[brief.id] = brief
        return brief

    def create_draft(self, brief_id, draft_json):
        draft = Draft(
            id=f"draft-{len(self.drafts) + 1}",
            brief_id=brief_id,
            draft_json=draft_json,
            created_at=f"2026-01-01T00:00:0{len(self.drafts)}+00:00",
        )
        self.drafts.append(draft)
        return draft

    def list_drafts(self, brief_id):
        return sorted(
            (d for d in self.drafts if d.brief_id == brief_id),
            key=lambda d: d.created_at,
            reverse=True,
        )


@pytest.fixture
def settings():
    return Settings(
        openai_api_key="sk-test",
        image_api_key="img-test",
        s3_bucket="test-bucket",
        queue_url="https://sqs.us-east-1.amazonaws.com/123456789012/creative-store",
    )


@pytest.fixture
def brief():
    return Brief(
        id="brief-1",
        project_id="project-1",
        intent_text="Launch a sale for eco-friendly sneakers targeting Gen Z",
        brief_json={
            "industry": "Retail",
            "placements": ["square_1_1"],
            "audience": {"interests": ["Gen Z"]},
            "keyBenefits": ["eco-friendly sneakers"],
            "style": {"tone": "bold", "keywords": ["urban", "green"]},
            "proposedHook": "Step green. Save big.",
        },
        constraints={"placements": ["square_1_1", "story_9_16"]},
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "OPENAI_API_KEY",
        "IMAGE_API_KEY",
        "QUEUE_URL",
        "LOG_LEVEL",
        "RESEARCH_MAX_STEPS",
        "IMAGE_POLL_INTERVAL",
        "IMAGE_POLL_ATTEMPTS",
    ):
        monkeypatch.delenv(name, raising=False)
