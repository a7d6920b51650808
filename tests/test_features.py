"""Tests for the node organiser, rule generator and connection test."""

import dataclasses
import json

import pytest

from node_assistant.errors import (EmptyResultError, UnsupportedClientFormatError,
                                   UpstreamError)
from node_assistant.features import (ClientFormat, ConnectionTestFeature,
                                     FeatureContext, NodeOrganizerFeature,
                                     RuleGeneratorFeature)
from node_assistant.features.rule_generator import (build_system_prompt,
                                                    format_description)


def _embedded_nodes(user_prompt):
    start = user_prompt.index("[")
    end = user_prompt.rindex("]") + 1
    return json.loads(user_prompt[start:end])


def test_organizer_returns_raw_reply(recording_client, sample_nodes):
    recording_client.reply = "not even json"
    result = NodeOrganizerFeature(FeatureContext(llm=recording_client)).run(sample_nodes)
    assert result.content == "not even json"


def test_organizer_sends_system_then_user(recording_client, sample_nodes):
    NodeOrganizerFeature(FeatureContext(llm=recording_client)).run(sample_nodes, "split by speed")
    (conversation,) = recording_client.calls
    assert [prompt.role for prompt in conversation] == ["system", "user"]
    assert '"groups"' in conversation[0].content
    assert "User instruction: split by speed" in conversation[1].content
    assert _embedded_nodes(conversation[1].content) == [node.as_dict() for node in sample_nodes]


def test_organizer_default_instruction(recording_client, sample_nodes):
    NodeOrganizerFeature(FeatureContext(llm=recording_client)).run(sample_nodes)
    user_prompt = recording_client.calls[0][1].content
    assert "region and protocol" in user_prompt
    assert "User instruction" not in user_prompt


def test_organizer_propagates_client_errors(make_recording_client, sample_nodes):
    client = make_recording_client(error=UpstreamError(500, "boom"))
    with pytest.raises(UpstreamError):
        NodeOrganizerFeature(FeatureContext(llm=client)).run(sample_nodes)


def test_node_json_keeps_non_ascii(recording_client, sample_nodes):
    NodeOrganizerFeature(FeatureContext(llm=recording_client)).run(sample_nodes)
    assert "日本 Tokyo" in recording_client.calls[0][1].content


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", ClientFormat.clash),
        (None, ClientFormat.clash),
        ("clash", ClientFormat.clash),
        ("Surge", ClientFormat.surge),
        (" generic ", ClientFormat.generic),
    ],
)
def test_client_format_parse(value, expected):
    assert ClientFormat.parse(value) is expected


def test_client_format_rejects_unknown():
    with pytest.raises(UnsupportedClientFormatError) as excinfo:
        ClientFormat.parse("quantumult")
    assert excinfo.value.value == "quantumult"
    assert isinstance(excinfo.value, ValueError)


def test_every_client_format_has_a_description():
    for client_format in ClientFormat:
        assert format_description(client_format)


def test_rule_prompts_follow_client_format():
    assert "rules:" in build_system_prompt(ClientFormat.clash)
    assert "Clash/Mihomo" in build_system_prompt(ClientFormat.clash)
    assert "[Rule]" in build_system_prompt(ClientFormat.surge)
    assert "FINAL," in build_system_prompt(ClientFormat.surge)
    assert "generic proxy rule syntax" in build_system_prompt(ClientFormat.generic)
    assert '"proxyGroups"' in build_system_prompt(ClientFormat.generic)


def test_rule_generator_user_prompt(recording_client, sample_nodes):
    feature = RuleGeneratorFeature(FeatureContext(llm=recording_client))
    result = feature.run(sample_nodes, ClientFormat.surge, "route Netflix through JP")
    system, user = recording_client.calls[0]
    assert "surge subscription rules" in system.content
    assert user.content.endswith("User requirements: route Netflix through JP")
    assert _embedded_nodes(user.content)[1]["id"] == 7
    assert result.content == recording_client.reply


def test_rule_generator_default_instruction(recording_client, sample_nodes):
    RuleGeneratorFeature(FeatureContext(llm=recording_client)).run(sample_nodes)
    system, user = recording_client.calls[0]
    assert "clash subscription rules" in system.content
    assert "streaming" in user.content


def test_connection_test_sends_single_message(make_recording_client):
    client = make_recording_client(reply="ok")
    assert ConnectionTestFeature(FeatureContext(llm=client)).run() == "ok"
    (conversation,) = client.calls
    assert len(conversation) == 1
    assert conversation[0].role == "user"


def test_connection_test_rejects_empty_reply(make_recording_client):
    client = make_recording_client(reply="")
    with pytest.raises(EmptyResultError):
        ConnectionTestFeature(FeatureContext(llm=client)).run()


@pytest.mark.parametrize(
    "feature_cls", [NodeOrganizerFeature, RuleGeneratorFeature, ConnectionTestFeature]
)
def test_features_only_carry_their_context(feature_cls):
    assert [field.name for field in dataclasses.fields(feature_cls)] == ["context"]
