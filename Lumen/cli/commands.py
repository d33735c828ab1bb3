"""Command handlers for the Lumen REPL."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

from ..actions.catalog import INTENT_ACTIONS
from ..core.handler import IntentHandler
from ..core.types import Entity
from ..extraction.entities import extract_parameters


def _print_json(payload: Any) -> None:
	print(json.dumps(payload, indent=2, ensure_ascii=False))


def _format_entity(entity: Entity) -> str:
	return (
		f"{entity.type.value:8s} {entity.value!r} ({entity.confidence:.2f}) "
		f"@ {entity.span.start}-{entity.span.end}"
	)


def _print_entities(entities: List[Entity]) -> None:
	if not entities:
		print("[LUMEN] entities: none")
		return
	print("[LUMEN] entities:")
	for entity in entities:
		print(f"  {_format_entity(entity)}")


def _classify(handler: IntentHandler, query: str, as_json: bool) -> Dict[str, Any]:
	result = handler.classify_intent_sync(query)
	payload = result.to_dict()
	if as_json:
		_print_json(payload)
		return payload

	print(f"[LUMEN] intent={result.intent} confidence={result.confidence:.2f}")
	_print_entities(result.entities)
	if result.parameters:
		print(f"[LUMEN] parameters: {json.dumps(result.parameters, ensure_ascii=False)}")
	if result.suggested_actions:
		print(f"[LUMEN] actions: {', '.join(a.id for a in result.suggested_actions)}")
	for question in result.clarification_questions:
		print(f"[LUMEN] clarify: {question}")
	return payload


def _entities(handler: IntentHandler, query: str, as_json: bool) -> Dict[str, Any]:
	found = handler.extract_entities(query)
	payload = {
		"entities": [e.to_dict() for e in found],
		"parameters": extract_parameters(found),
	}
	if as_json:
		_print_json(payload)
	else:
		_print_entities(found)
	return payload


def _explain(handler: IntentHandler, query: str, as_json: bool) -> Dict[str, Any]:
	classification = handler.explain(query)
	payload = classification.to_dict()
	if as_json:
		_print_json(payload)
		return payload

	print(f"[LUMEN] normalized: {classification.normalized_query!r}")
	for intent, score in classification.scores.items():
		marker = "*" if intent == classification.intent else " "
		print(f"  {marker} {intent:10s} {score}")
	print(f"[LUMEN] winner: {classification.intent}")
	if classification.matched_rules:
		print("[LUMEN] matched:")
		for intent, rules in classification.matched_rules.items():
			print(f"  {intent}: {', '.join(rules)}")
	return payload


def _actions(handler: IntentHandler, intent: str, as_json: bool) -> Dict[str, Any]:
	registry = handler.action_suggester.registry
	if intent:
		if intent not in INTENT_ACTIONS:
			print(f"[LUMEN] No actions map to intent '{intent}'.")
			return {"actions": []}
		candidates = (registry.get_action(i) for i in INTENT_ACTIONS[intent])
		actions = [a for a in candidates if a is not None and a.enabled]
	else:
		actions = registry.get_actions()

	payload = {"actions": [a.to_dict() for a in actions]}
	if as_json:
		_print_json(payload)
		return payload

	for action in actions:
		required = ", ".join(action.required_parameters) or "-"
		print(f"  {action.id:32s} {action.name} (required: {required})")
	return payload


def handle_command(handler: IntentHandler, cmd: str, options: Dict[str, Any]) -> Tuple[bool, Dict[str, Any]]:
	"""Handle a single REPL command.

	``options`` is REPL state shared across commands (currently the
	``json`` output toggle). Returns (should_continue, debug_info).
	"""
	cmd = (cmd or "").strip()
	if not cmd:
		return True, {}

	if cmd.lower() in {"exit", "quit"}:
		return False, {}

	name, _, rest = cmd.partition(" ")
	name = name.lower()
	rest = rest.strip()
	as_json = bool(options.get("json"))

	if name in {"classify", "entities", "explain"}:
		if not rest:
			print(f"Usage: {name} <query>")
			return True, {}
		runner = {"classify": _classify, "entities": _entities, "explain": _explain}[name]
		return True, runner(handler, rest, as_json)

	if name == "actions":
		return True, _actions(handler, rest.lower(), as_json)

	if name == "json":
		if rest.lower() not in {"on", "off"}:
			print("Usage: json on|off")
			return True, {}
		options["json"] = rest.lower() == "on"
		print(f"[LUMEN] JSON output {'enabled' if options['json'] else 'disabled'}.")
		return True, {}

	# Bare text is treated as a query.
	return True, _classify(handler, cmd, as_json)


__all__ = ["handle_command"]
