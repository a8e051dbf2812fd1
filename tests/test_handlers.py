import base64
import json

from creative_store.handlers import brief as brief_handlers
from creative_store.handlers import creative as creative_handlers
from creative_store.handlers import enqueue
from creative_store.errors import AIError
from creative_store.models import BriefSchema, ResearchResult, ResearchSource
from creative_store.services import BriefService, CreativeService

from .conftest import FakeImageClient, FakeLLM, FakeRecords, FakeStorage

INTENT = "Launch a sale for eco-friendly sneakers targeting Gen Z"


def http_event(body, **path):
    return {"body": json.dumps(body), "pathParameters": path or None}


def body_of(response):
    return json.loads(response["body"])


def failing_service(settings):
    return BriefService(FakeLLM(research_error=RuntimeError("Bedrock throttled the request")), settings)


# ===== Brief parsing =====


def test_parse_handler_success(settings):
    llm = FakeLLM(
        research=ResearchResult(
            text="EcoStep dominates the segment.",
            step_count=2,
            sources=[ResearchSource(url="https://example.com")],
        ),
        extracted=BriefSchema(industry="Retail"),
    )
    event = http_event({"intentText": INTENT, "placements": ["square_1_1"]})

    response = brief_handlers.parse_handler(event, None, service=BriefService(llm, settings))

    assert response["statusCode"] == 200
    body = body_of(response)
    assert body["briefJson"]["industry"] == "Retail"
    assert body["researchSummary"] == "EcoStep dominates the segment."
    assert body["sources"] == [{"url": "https://example.com"}]
    assert body["stepCount"] == 2
    assert body["warnings"] == []


def test_parse_handler_surfaces_ai_error(settings):
    event = http_event({"intentText": INTENT, "placements": ["square_1_1"]})

    response = brief_handlers.parse_handler(event, None, service=failing_service(settings))

    assert response["statusCode"] == 500
    assert body_of(response) == {"error": "Bedrock throttled the request", "code": "AI_ERROR"}


def test_parse_handler_rejects_unknown_placement(settings):
    llm = FakeLLM()
    event = http_event({"intentText": INTENT, "placements": ["billboard_99"]})

    response = brief_handlers.parse_handler(event, None, service=BriefService(llm, settings))

    assert response["statusCode"] == 400
    assert body_of(response)["code"] == "VALIDATION_ERROR"
    assert llm.research_calls == []


def test_parse_handler_rejects_empty_intent(settings):
    event = http_event({"intentText": "   ", "placements": ["square_1_1"]})

    response = brief_handlers.parse_handler(event, None, service=failing_service(settings))

    assert response["statusCode"] == 400


def test_parse_handler_rejects_invalid_json(settings):
    response = brief_handlers.parse_handler({"body": "{not json"}, None, service=failing_service(settings))

    assert response["statusCode"] == 400
    assert body_of(response)["code"] == "VALIDATION_ERROR"


def test_create_handler_falls_back_to_deterministic_brief(settings):
    records = FakeRecords()
    event = http_event(
        {"intentText": INTENT, "placements": ["square_1_1", "tv_4k"], "industry": "Retail"},
        projectId="project-1",
    )

    response = brief_handlers.create_handler(event, None, service=failing_service(settings), records=records)

    assert response["statusCode"] == 200
    brief = body_of(response)["brief"]
    assert brief["projectId"] == "project-1"
    assert brief["constraints"] == {"placements": ["square_1_1", "tv_4k"]}
    assert brief["briefJson"]["keyBenefits"] == ["eco-friendly sneakers"]
    assert brief["briefJson"]["audience"] == {"interests": ["Gen Z"]}
    assert brief["briefJson"]["industry"] == "Retail"
    assert brief["briefJson"]["proposedHook"] == INTENT
    assert len(records.briefs) == 1


def test_create_handler_uses_ai_brief_when_available(settings):
    records = FakeRecords()
    llm = FakeLLM(extracted=BriefSchema(industry="Footwear", proposed_hook="Step green."))
    event = http_event({"intentText": INTENT, "placements": ["feed_4_5"]}, projectId="project-1")

    response = brief_handlers.create_handler(event, None, service=BriefService(llm, settings), records=records)

    brief_json = body_of(response)["brief"]["briefJson"]
    assert brief_json["industry"] == "Footwear"
    assert brief_json["proposedHook"] == "Step green."


def test_create_handler_requires_project_id(settings):
    event = http_event({"intentText": INTENT, "placements": ["feed_4_5"]})

    response = brief_handlers.create_handler(event, None, service=failing_service(settings), records=FakeRecords())

    assert response["statusCode"] == 400


def test_create_handler_falls_back_when_client_cannot_be_built(monkeypatch):
    def broken_client(cls, settings):
        raise RuntimeError("The api_key client option must be set")

    monkeypatch.setattr(brief_handlers.LLMClient, "from_settings", classmethod(broken_client))
    records = FakeRecords()
    event = http_event({"intentText": INTENT, "placements": ["square_1_1"]}, projectId="project-1")

    response = brief_handlers.create_handler(event, None, records=records)

    assert response["statusCode"] == 200
    assert body_of(response)["brief"]["briefJson"]["keyBenefits"] == ["eco-friendly sneakers"]
    assert len(records.briefs) == 1


def test_brief_handlers_report_bad_config(monkeypatch):
    monkeypatch.setenv("RESEARCH_MAX_STEPS", "eight")
    body = {"intentText": INTENT, "placements": ["square_1_1"]}
    expected = {"error": "RESEARCH_MAX_STEPS must be a number, got 'eight'", "code": "AI_ERROR"}

    parsed = brief_handlers.parse_handler(http_event(body), None)
    created = brief_handlers.create_handler(http_event(body, projectId="project-1"), None, records=FakeRecords())

    assert parsed["statusCode"] == 500
    assert body_of(parsed) == expected
    assert created["statusCode"] == 500
    assert body_of(created) == expected


# ===== Creative generation =====


def creative_service(settings, brief, image=None):
    return CreativeService(image or FakeImageClient(), FakeStorage(), FakeRecords([brief]), settings)


def test_generate_handler_success(settings, brief):
    event = http_event({"briefId": brief.id, "placement": "square_1_1"})

    response = creative_handlers.generate_handler(event, None, service=creative_service(settings, brief))

    assert response["statusCode"] == 200
    body = body_of(response)
    assert body["image"]["aspectRatio"] == "1:1"
    assert body["draft"]["briefId"] == brief.id
    assert body["draft"]["draftJson"]["imageUrl"] == body["image"]["imageUrl"]


def sqs_event(*messages):
    return {
        "Records": [
            {"messageId": f"msg-{i}", "body": json.dumps(message)}
            for i, message in enumerate(messages, start=1)
        ]
    }


def test_generate_handler_from_sqs_with_logo(settings, brief):
    image = FakeImageClient()
    logo_b64 = base64.b64encode(b"\x89PNG logo").decode("ascii")
    event = sqs_event({
        "briefId": brief.id,
        "placement": "story_9_16",
        "brandAssets": [{"kind": "logo", "mimeType": "image/png", "dataBase64": logo_b64, "name": "logo.png"}],
    })

    response = creative_handlers.generate_handler(event, None, service=creative_service(settings, brief, image))

    assert response == {"batchItemFailures": []}
    assert image.call_count == 2


def test_generate_handler_processes_every_sqs_record(settings, brief):
    service = creative_service(settings, brief)
    event = sqs_event(
        {"briefId": brief.id, "placement": "square_1_1"},
        {"briefId": brief.id, "placement": "story_9_16"},
    )

    response = creative_handlers.generate_handler(event, None, service=service)

    assert response == {"batchItemFailures": []}
    assert [d.draft_json["placement"] for d in service.records.drafts] == ["square_1_1", "story_9_16"]


def test_generate_handler_reports_failed_sqs_records(settings, brief):
    image = FakeImageClient(generate_error=AIError("Image service error: quota exceeded"))
    service = creative_service(settings, brief, image)
    event = sqs_event(
        {"briefId": brief.id, "placement": "square_1_1"},
        {"briefId": brief.id, "placement": "billboard_99"},
        {"briefId": "missing", "placement": "square_1_1"},
        {"briefId": brief.id, "placement": "tv_4k"},
    )

    response = creative_handlers.generate_handler(event, None, service=service)

    # Bad placements and unknown briefs would fail again on redelivery
    assert response == {"batchItemFailures": [{"itemIdentifier": "msg-1"}, {"itemIdentifier": "msg-4"}]}
    assert len(image.generate_calls) == 2
    assert service.records.drafts == []


def test_generate_handler_retries_whole_batch_on_bad_config(monkeypatch, brief):
    monkeypatch.setenv("IMAGE_POLL_ATTEMPTS", "many")
    event = sqs_event(
        {"briefId": brief.id, "placement": "square_1_1"},
        {"briefId": brief.id, "placement": "story_9_16"},
    )

    response = creative_handlers.generate_handler(event, None)

    assert response == {"batchItemFailures": [{"itemIdentifier": "msg-1"}, {"itemIdentifier": "msg-2"}]}


def test_generate_handler_bad_config_over_http(monkeypatch, brief):
    monkeypatch.setenv("IMAGE_POLL_INTERVAL", "soon")
    event = http_event({"briefId": brief.id, "placement": "square_1_1"})

    response = creative_handlers.generate_handler(event, None)

    assert response["statusCode"] == 500
    assert body_of(response) == {"error": "IMAGE_POLL_INTERVAL must be a number, got 'soon'", "code": "AI_ERROR"}


def test_generate_handler_missing_api_key(monkeypatch, brief):
    monkeypatch.setenv("S3_BUCKET", "test-bucket")
    image = FakeImageClient()
    event = http_event({"briefId": brief.id, "placement": "square_1_1"})
    monkeypatch.setattr(creative_handlers.ImageClient, "from_settings", classmethod(lambda cls, s: image))
    monkeypatch.setattr(creative_handlers.StorageClient, "from_settings", classmethod(lambda cls, s: FakeStorage()))
    monkeypatch.setattr(creative_handlers.RecordsClient, "from_settings", classmethod(lambda cls, s: FakeRecords([brief])))

    response = creative_handlers.generate_handler(event, None)

    assert response["statusCode"] == 500
    assert body_of(response) == {"error": "IMAGE_API_KEY is not configured", "code": "MISSING_API_KEY"}
    assert image.call_count == 0


def test_generate_handler_unknown_placement(settings, brief):
    image = FakeImageClient()
    event = http_event({"briefId": brief.id, "placement": "billboard_99"})

    response = creative_handlers.generate_handler(event, None, service=creative_service(settings, brief, image))

    assert response["statusCode"] == 400
    assert image.call_count == 0


def test_generate_handler_unknown_brief(settings, brief):
    event = http_event({"briefId": "missing", "placement": "square_1_1"})

    response = creative_handlers.generate_handler(event, None, service=creative_service(settings, brief))

    assert response["statusCode"] == 404
    assert body_of(response)["code"] == "not_found"


def test_generate_handler_rejects_bad_asset(settings, brief):
    event = http_event({
        "briefId": brief.id,
        "placement": "square_1_1",
        "brandAssets": [{"kind": "sticker", "mimeType": "image/png", "dataBase64": "AAAA"}],
    })

    response = creative_handlers.generate_handler(event, None, service=creative_service(settings, brief))

    assert response["statusCode"] == 400


def test_list_drafts_handler(settings, brief):
    service = creative_service(settings, brief)
    service.generate(brief.id, "square_1_1")
    service.generate(brief.id, "story_9_16")

    response = creative_handlers.list_drafts_handler({"pathParameters": {"briefId": brief.id}}, None, records=service.records)

    drafts = body_of(response)["drafts"]
    assert response["statusCode"] == 200
    assert [d["draftJson"]["placement"] for d in drafts] == ["story_9_16", "square_1_1"]


# ===== Enqueue =====


class FakeSQS:
    def __init__(self):
        self.messages = []

    def send_message(self, QueueUrl, MessageBody):
        self.messages.append((QueueUrl, json.loads(MessageBody)))
        return {"MessageId": f"msg-{len(self.messages)}"}


def test_enqueue_uses_brief_placements(monkeypatch, brief):
    monkeypatch.setenv("QUEUE_URL", "https://sqs.test/queue")
    sqs = FakeSQS()
    event = {"pathParameters": {"briefId": brief.id}, "body": None}

    response = enqueue.handler(event, None, sqs=sqs, records=FakeRecords([brief]))

    assert response["statusCode"] == 200
    assert body_of(response) == {"status": "queued", "briefId": brief.id, "messageIds": ["msg-1", "msg-2"]}
    assert sqs.messages == [
        ("https://sqs.test/queue", {"briefId": brief.id, "placement": "square_1_1"}),
        ("https://sqs.test/queue", {"briefId": brief.id, "placement": "story_9_16"}),
    ]


def test_enqueue_body_placements_override(monkeypatch, brief):
    monkeypatch.setenv("QUEUE_URL", "https://sqs.test/queue")
    sqs = FakeSQS()
    event = http_event({"placements": ["tv_4k"]}, briefId=brief.id)

    response = enqueue.handler(event, None, sqs=sqs, records=FakeRecords())

    assert body_of(response)["messageIds"] == ["msg-1"]
    assert sqs.messages[0][1]["placement"] == "tv_4k"


def test_enqueue_rejects_unknown_placement(monkeypatch, brief):
    monkeypatch.setenv("QUEUE_URL", "https://sqs.test/queue")
    sqs = FakeSQS()
    event = http_event({"placements": ["billboard_99"]}, briefId=brief.id)

    response = enqueue.handler(event, None, sqs=sqs, records=FakeRecords())

    assert response["statusCode"] == 400
    assert sqs.messages == []


def test_enqueue_unknown_brief(monkeypatch):
    monkeypatch.setenv("QUEUE_URL", "https://sqs.test/queue")
    event = {"pathParameters": {"briefId": "missing"}}

    response = enqueue.handler(event, None, sqs=FakeSQS(), records=FakeRecords())

    assert response["statusCode"] == 404


def test_enqueue_reports_bad_config(monkeypatch, brief):
    monkeypatch.setenv("RESEARCH_MAX_STEPS", "")
    monkeypatch.setenv("IMAGE_POLL_ATTEMPTS", "3.5")
    sqs = FakeSQS()
    event = http_event({"placements": ["tv_4k"]}, briefId=brief.id)

    response = enqueue.handler(event, None, sqs=sqs, records=FakeRecords())

    assert response["statusCode"] == 500
    assert body_of(response)["error"] == "IMAGE_POLL_ATTEMPTS must be a number, got '3.5'"
    assert sqs.messages == []
