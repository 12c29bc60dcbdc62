"""Tests for the search orchestrator: size gate, backend path and fallbacks."""
import json
import logging

import pytest

from models import Bond, Case, Client, Document, RecordSnapshot
from smartsearch import SearchPath, SearchPipeline
from smartsearch.pipeline import query_fingerprint


def _premium_snapshot(per_type: int = 20) -> RecordSnapshot:
    return RecordSnapshot(
        bonds=[Bond(id=f"bond-{i}", bond_number=f"BB-{i}", bond_type="premium surety") for i in range(80)],
        cases=[Case(id=f"case-{i}", case_number=f"CR-{i}", charge_description="premium fraud") for i in range(per_type)],
        documents=[Document(id=f"doc-{i}", file_name=f"premium_{i}.pdf") for i in range(per_type)],
    )


def test_oversized_candidate_set_never_calls_backend(stub_backend_factory):
    backend = stub_backend_factory(response='{"results": []}')
    pipeline = SearchPipeline(backend=backend)

    outcome = pipeline.run("premium", _premium_snapshot())
    results = outcome.results

    assert backend.call_count == 0
    assert outcome.path == SearchPath.OVERSIZED
    assert len(results) == 10
    scores = [r.relevance_score for r in results]
    assert scores == sorted(scores, reverse=True)
    # every record matches the only term, so ties keep case → bond → document order
    assert [r.record_type for r in results] == ["case"] * 10


def test_per_type_cap_keeps_single_type_under_the_gate(stub_backend_factory, ranking_response):
    snapshot = RecordSnapshot(
        bonds=[Bond(id=f"bond-{i}", bond_number=f"BB-{i}", bond_type="premium") for i in range(80)],
    )
    backend = stub_backend_factory(response=ranking_response(("bond", "bond-3", 0.7)))
    pipeline = SearchPipeline(backend=backend)

    outcome = pipeline.run("premium", snapshot)

    assert backend.call_count == 1
    assert len(backend.requests[0].sanitized_data["bonds"]) == 20
    assert outcome.path == SearchPath.RANKED
    assert [r.record_id for r in outcome.results] == ["bond-3"]


# 20 bonds + 20 cases + documents: exactly 50 candidates still reaches the backend
@pytest.mark.parametrize("documents, expected_calls", [(10, 1), (11, 0)])
def test_gate_trips_only_above_the_limit(documents, expected_calls, stub_backend_factory):
    snapshot = RecordSnapshot(
        bonds=[Bond(id=f"bond-{i}", bond_number=f"BB-{i}", bond_type="premium") for i in range(20)],
        cases=[Case(id=f"case-{i}", case_number=f"CR-{i}", charge_type="premium") for i in range(20)],
        documents=[Document(id=f"doc-{i}", file_name=f"premium_{i}.pdf") for i in range(documents)],
    )
    backend = stub_backend_factory(response='{"results": []}')

    SearchPipeline(backend=backend).search("premium", snapshot)

    assert backend.call_count == expected_calls


@pytest.mark.parametrize("query", ["xy", "a", "to be"])
def test_short_queries_return_nothing(query, sample_snapshot, stub_backend_factory):
    backend = stub_backend_factory(response='{"results": []}')
    pipeline = SearchPipeline(backend=backend)

    outcome = pipeline.run(query, sample_snapshot)

    assert outcome.results == []
    assert backend.call_count == 0
    assert outcome.path == SearchPath.EMPTY


def test_backend_receives_only_sanitized_candidates(sample_snapshot, stub_backend_factory, ranking_response):
    backend = stub_backend_factory(response=ranking_response(("client", "client-1", 0.95)))
    pipeline = SearchPipeline(backend=backend)

    results = pipeline.search("John", sample_snapshot)

    assert backend.call_count == 1
    request = backend.requests[0]
    assert request.query == "John"
    assert request.sanitized_data["clients"] == [
        {"id": "client-1", "initials": "JS", "generalLocation": "Houston", "yearOfBirth": 1985},
    ]
    assert request.sanitized_data["bonds"] == []
    payload = request.user_message()
    assert "Smith" not in payload
    assert "john.smith@example.com" not in payload
    assert "1985-03-14" not in payload
    assert results[0].record_id == "client-1"
    assert results[0].relevance_score == pytest.approx(0.95)


def test_spanish_instructions(sample_snapshot, stub_backend_factory):
    backend = stub_backend_factory(response='{"results": []}')

    SearchPipeline(backend=backend).search("john", sample_snapshot, language="es")

    assert backend.requests[0].instructions.startswith("Eres un asistente experto")
    assert backend.requests[0].language == "es"


def test_unsupported_language_raises(sample_snapshot, stub_backend_factory):
    with pytest.raises(ValueError):
        SearchPipeline(backend=stub_backend_factory()).search("john", sample_snapshot, language="fr")


def test_empty_results_from_backend_are_a_success(sample_snapshot, stub_backend_factory):
    backend = stub_backend_factory(response='{"results": []}')
    pipeline = SearchPipeline(backend=backend)

    outcome = pipeline.run("john", sample_snapshot)

    assert outcome.results == []
    assert outcome.path == SearchPath.RANKED


@pytest.mark.parametrize("failure", [
    {"error": ConnectionError("connection reset")},
    {"error": TimeoutError("timed out")},
    {"response": "I could not find anything."},
    {"response": '{"matches": []}'},
    {"response": None},
    {"response": "[" * 100000 + "]" * 100000},
    {"response": {"results": "garbage"}},
    {"response": b'{"results": []}'},
])
def test_backend_failures_fall_back_to_local_ranking(failure, sample_snapshot, stub_backend_factory):
    backend = stub_backend_factory(**failure)
    pipeline = SearchPipeline(backend=backend)

    outcome = pipeline.run("John", sample_snapshot)
    results = outcome.results

    assert backend.call_count == 1
    assert outcome.path == SearchPath.BACKEND_FAILED
    assert len(results) <= 10
    assert results[0].record_type == "client"
    assert results[0].record_id == "client-1"
    assert results[0].relevance_score > 0
    assert all("ranked remotely" not in r.description for r in results)


def test_fallback_scores_come_from_local_matching(sample_snapshot, stub_backend_factory):
    backend = stub_backend_factory(error=RuntimeError("rate limited"))

    results = SearchPipeline(backend=backend).search("john dui", sample_snapshot)

    by_id = {r.record_id: r.relevance_score for r in results}
    assert by_id == {"client-1": 0.5, "case-1": 0.5}


def test_no_backend_ranks_locally(sample_snapshot):
    pipeline = SearchPipeline()

    outcome = pipeline.run("John", sample_snapshot)

    assert outcome.path == SearchPath.NO_BACKEND
    assert outcome.results[0].title == "John Smith"


def test_john_smith_scenario(stub_backend_factory, ranking_response):
    snapshot = RecordSnapshot(
        clients=[Client(id="js", first_name="John", last_name="Smith")],
        bonds=[Bond(id=f"bond-{i}", bond_number=f"BB-{i}", bond_type="surety") for i in range(60)],
    )
    backend = stub_backend_factory(response=ranking_response(("client", "js", 0.9)))

    results = SearchPipeline(backend=backend).search("John", snapshot)

    assert backend.call_count == 1
    assert sum(len(items) for items in backend.requests[0].sanitized_data.values()) == 1
    assert [(r.record_type, r.record_id) for r in results] == [("client", "js")]
    assert results[0].relevance_score > 0


def test_backend_cannot_invent_records(sample_snapshot, stub_backend_factory, ranking_response):
    backend = stub_backend_factory(response=ranking_response(("client", "client-1", 0.9), ("client", "ghost", 1.0)))

    results = SearchPipeline(backend=backend).search("john", sample_snapshot)

    assert [r.record_id for r in results] == ["client-1"]


def test_identical_inputs_give_identical_output(sample_snapshot, stub_backend_factory, ranking_response):
    response = ranking_response(("client", "client-1", 0.9), ("document", "doc-1", 0.4))
    pipeline = SearchPipeline(backend=stub_backend_factory(response=response))

    first = pipeline.search("smith", sample_snapshot)
    second = pipeline.search("smith", sample_snapshot)

    assert first == second
    assert [r.record_id for r in first] == ["client-1", "doc-1"]


def test_local_path_is_deterministic():
    snapshot = _premium_snapshot()
    pipeline = SearchPipeline()

    assert pipeline.search("premium", snapshot) == pipeline.search("premium", snapshot)


def test_non_snapshot_input_raises():
    with pytest.raises(TypeError):
        SearchPipeline().search("john", {"clients": []})


def test_non_list_record_sets_raise():
    with pytest.raises(TypeError):
        RecordSnapshot(clients="john smith")


def test_raw_query_is_not_logged(sample_snapshot, stub_backend_factory, caplog):
    backend = stub_backend_factory(error=RuntimeError("boom"))

    with caplog.at_level(logging.INFO):
        SearchPipeline(backend=backend).search("John Smith", sample_snapshot)

    assert "John Smith" not in caplog.text
    assert query_fingerprint("john  smith") in caplog.text
    assert "Ranking backend failed" in caplog.text


def test_results_serialize_to_wire_shape(sample_snapshot):
    results = SearchPipeline().search("john", sample_snapshot)

    payload = json.loads(json.dumps({"results": [r.to_dict() for r in results]}))

    assert payload["results"][0] == {
        "type": "client",
        "id": "client-1",
        "title": "John Smith",
        "description": "Email: jo***@example.com",
        "relevanceScore": 1.0,
    }


def test_huge_amounts_still_reach_the_backend(stub_backend_factory):
    snapshot = RecordSnapshot(bonds=[Bond(id="b", bond_number="BB-1", bond_type="surety", bond_amount=1e40)])
    backend = stub_backend_factory(response='{"results": []}')

    outcome = SearchPipeline(backend=backend).run("surety", snapshot)

    assert outcome.path == SearchPath.RANKED
    assert backend.requests[0].sanitized_data["bonds"][0]["bondAmount"] == 10 ** 40
