from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List

from flask import Flask, Response, jsonify, request

from extender.config import ExtenderConfig
from extender.errors import (
	EmptyRequestError,
	EncodingError,
	ExtenderError,
	MalformedRequestError,
	PriorityError,
)
from extender.models import ExtenderArgs, HostPriority
from extender.priorities import DEFAULT_PRIORITIES, PrioritizeMethod, build_registry

logger = logging.getLogger(__name__)

EMPTY_REQUEST_MESSAGE = "the request is empty, expecting a pod and a list of nodes!"


def create_app(config: ExtenderConfig, methods: Iterable[PrioritizeMethod] = DEFAULT_PRIORITIES) -> Flask:
	app = Flask(__name__)
	app.config['MAX_CONTENT_LENGTH'] = config.max_content_length
	app.config['extender_config'] = config
	registry = build_registry(methods)
	app.config['priorities'] = registry

	for method in registry.values():
		path = config.route_for(method.name)
		app.add_url_rule(
			path,
			endpoint=f"prioritize_{method.name}",
			view_func=_prioritize_route(method),
			methods=["POST"],
		)
		logger.info(f"added priority method: {method.name} at path: {path}")

	@app.errorhandler(ExtenderError)
	def handle_extender_error(err: ExtenderError) -> Any:
		if isinstance(err, PriorityError):
			logger.error(err.message, exc_info=err.cause)
		elif err.status_code >= 500:
			logger.error(err.message)
		else:
			logger.warning(f"rejected request to {request.path}: {err.message}")
		return Response(err.message, status=err.status_code, mimetype="text/plain")

	@app.get("/healthz")
	def healthz() -> Any:
		return jsonify({"status": "ok", "priorities": sorted(registry)})

	return app


def _prioritize_route(method: PrioritizeMethod):
	def prioritize() -> Any:
		raw = request.get_data(cache=False)
		if not raw or not raw.strip():
			raise EmptyRequestError(EMPTY_REQUEST_MESSAGE)
		logger.debug(f"detailed info: {method.name} ExtenderArgs = {raw!r}")

		args = _decode(raw)
		priorities = _score(method, args)
		body = _encode(priorities)

		logger.debug(f"priorityMethod {method.name}, hostPriorityList = {body}")
		return Response(body, status=200, mimetype="application/json")

	return prioritize


def _decode(raw: bytes) -> ExtenderArgs:
	try:
		body = json.loads(raw)
	except (ValueError, RecursionError) as e:
		raise MalformedRequestError(f"cannot decode extender args: {e}")
	return ExtenderArgs.from_dict(body)


def _score(method: PrioritizeMethod, args: ExtenderArgs) -> List[HostPriority]:
	try:
		priorities = method.prioritize(args.pod, args.nodes)
	except ExtenderError:
		raise
	except Exception as e:
		raise PriorityError(method.name, e) from e

	# One entry per requested node, no duplicates
	hosts = [p.host for p in priorities]
	if len(set(hosts)) != len(hosts) or set(hosts) != {n.name for n in args.nodes}:
		raise PriorityError(method.name, ValueError(f"host list {hosts} does not match the requested nodes"))
	return priorities


def _encode(priorities: List[HostPriority]) -> str:
	try:
		return json.dumps([p.to_dict() for p in priorities])
	except (TypeError, ValueError) as e:
		raise EncodingError(f"cannot encode host priority list: {e}")
