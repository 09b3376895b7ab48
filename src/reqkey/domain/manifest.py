"""Key manifests: a model's key tree described in YAML.

Two document shapes are accepted:

- A tree, mirroring the model's directory layout::

      domains:
        orders:
          subdomains:
            default:
              classes:
                book_order:
                  states: [open, closed]
                  actions: [calculate_total]
                  guards: [has_items]
                  state_actions:
                    open:
                      - {when: entry, action: calculate_total}
              usecases: [place_order]

- A flat list of stored key strings (the output of :func:`dump_keys`).

Loading never stops at the first bad entry: every key that can be built is
returned, and every failure is reported as a :class:`ManifestIssue`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from reqkey.domain.errors import KeyFormatError
from reqkey.domain.keys import (
    Key,
    new_action_key,
    new_class_key,
    new_domain_key,
    new_guard_key,
    new_state_action_key,
    new_state_key,
    new_subdomain_key,
    new_usecase_key,
    parse,
)


class ManifestError(ValueError):
    """The manifest document itself is unreadable (bad YAML or wrong shape)."""


@dataclass(frozen=True)
class ManifestIssue:
    """One problem found while building a manifest's keys."""

    path: str
    code: str
    message: str


@dataclass
class ManifestResult:
    """Keys built from a manifest plus any issues found along the way."""

    keys: list[Key] = field(default_factory=list)
    issues: list[ManifestIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


# ---------------------------------------------------------------------------
# YAML I/O
# ---------------------------------------------------------------------------


def _new_yaml() -> YAML:
    """Create a fresh safe YAML instance (ruamel.yaml instances are stateful)."""
    y = YAML(typ="safe")
    y.default_flow_style = False
    return y


def dump_keys(keys: Iterable[Key]) -> str:
    """Render *keys* as a YAML list of stored key strings."""
    buf = StringIO()
    _new_yaml().dump([str(key) for key in keys], buf)
    return buf.getvalue()


def load_manifest(text: str) -> ManifestResult:
    """Build every key described by a manifest document.

    Raises:
        ManifestError: If the YAML cannot be parsed or the top level is
            neither a mapping nor a list.
    """
    try:
        data = _new_yaml().load(text)
    except YAMLError as exc:
        msg = f"Invalid YAML in manifest: {exc}"
        raise ManifestError(msg) from exc

    loader = _ManifestLoader()
    if data is None:
        return loader.result
    if isinstance(data, list):
        loader.load_flat(data)
    elif isinstance(data, dict):
        loader.load_tree(data)
    else:
        msg = f"Manifest must be a mapping or a list, got {type(data).__name__}"
        raise ManifestError(msg)
    return loader.result


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

_DOMAIN_FIELDS = frozenset({"subdomains"})
_SUBDOMAIN_FIELDS = frozenset({"classes", "usecases"})
_CLASS_FIELDS = frozenset({"states", "actions", "guards", "state_actions"})
_STATE_ACTION_FIELDS = frozenset({"when", "action"})


class _ManifestLoader:
    """Walks a manifest document, accumulating keys and issues."""

    def __init__(self) -> None:
        self.result = ManifestResult()
        self._seen: set[Key] = set()

    # --- Recording ---

    def _issue(self, path: str, code: str, message: str) -> None:
        self.result.issues.append(ManifestIssue(path=path, code=code, message=message))

    def _add(self, path: str, key: Key) -> bool:
        if key in self._seen:
            self._issue(path, "DUPLICATE_KEY", f"Key '{key}' is declared more than once")
            return False
        self._seen.add(key)
        self.result.keys.append(key)
        return True

    def _attempt(self, path: str, factory: Any, *args: Any) -> Key | None:
        """Build a key, recording a failure as an issue instead of raising."""
        try:
            key = factory(*args)
        except KeyFormatError as exc:
            self._issue(path, exc.code, str(exc))
            return None
        return key if self._add(path, key) else None

    def _section(self, path: str, body: Any, allowed: frozenset[str]) -> dict[str, Any]:
        if body is None:
            return {}
        if not isinstance(body, dict):
            self._issue(path, "MALFORMED_ENTRY", f"Expected a mapping, got {type(body).__name__}")
            return {}
        for name in body:
            if name not in allowed:
                self._issue(f"{path}.{name}", "UNKNOWN_FIELD", f"Unknown field {name!r}")
        return body

    def _names(self, path: str, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, dict):
            return [str(name) for name in value]
        if isinstance(value, list):
            return [str(name) for name in value]
        msg = f"Expected a list of names, got {type(value).__name__}"
        self._issue(path, "MALFORMED_ENTRY", msg)
        return []

    # --- Flat documents ---

    def load_flat(self, items: list[Any]) -> None:
        for index, item in enumerate(items):
            path = f"[{index}]"
            if not isinstance(item, str):
                msg = f"Expected a key string, got {type(item).__name__}"
                self._issue(path, "MALFORMED_ENTRY", msg)
                continue
            self._attempt(path, parse, item)

    # --- Tree documents ---

    def load_tree(self, data: dict[str, Any]) -> None:
        body = self._section("", data, frozenset({"domains"}))
        domains = body.get("domains")
        if domains is None:
            return
        if not isinstance(domains, dict):
            self._issue("domains", "MALFORMED_ENTRY", "Expected a mapping of domains")
            return
        for name, domain_body in domains.items():
            path = f"domains.{name}"
            domain = self._attempt(path, new_domain_key, str(name))
            if domain is not None:
                self._load_domain(path, domain, domain_body)

    def _load_domain(self, path: str, domain: Key, body: Any) -> None:
        section = self._section(path, body, _DOMAIN_FIELDS)
        subdomains = section.get("subdomains") or {}
        if not isinstance(subdomains, dict):
            self._issue(f"{path}.subdomains", "MALFORMED_ENTRY", "Expected a mapping of subdomains")
            return
        for name, sub_body in subdomains.items():
            sub_path = f"{path}.subdomains.{name}"
            subdomain = self._attempt(sub_path, new_subdomain_key, domain, str(name))
            if subdomain is not None:
                self._load_subdomain(sub_path, subdomain, sub_body)

    def _load_subdomain(self, path: str, subdomain: Key, body: Any) -> None:
        section = self._section(path, body, _SUBDOMAIN_FIELDS)

        classes = section.get("classes") or {}
        if isinstance(classes, dict):
            for name, class_body in classes.items():
                class_path = f"{path}.classes.{name}"
                class_key = self._attempt(class_path, new_class_key, subdomain, str(name))
                if class_key is not None:
                    self._load_class(class_path, class_key, class_body)
        else:
            self._issue(f"{path}.classes", "MALFORMED_ENTRY", "Expected a mapping of classes")

        for name in self._names(f"{path}.usecases", section.get("usecases")):
            self._attempt(f"{path}.usecases.{name}", new_usecase_key, subdomain, name)

    def _load_class(self, path: str, class_key: Key, body: Any) -> None:
        section = self._section(path, body, _CLASS_FIELDS)

        states: dict[str, Key] = {}
        rejected: set[str] = set()
        for name in self._names(f"{path}.states", section.get("states")):
            state = self._attempt(f"{path}.states.{name}", new_state_key, class_key, name)
            if state is not None:
                states[state.name] = state
            else:
                rejected.add(name)

        actions: dict[str, Key] = {}
        for name in self._names(f"{path}.actions", section.get("actions")):
            action = self._attempt(f"{path}.actions.{name}", new_action_key, class_key, name)
            if action is not None:
                actions[action.name] = action

        for name in self._names(f"{path}.guards", section.get("guards")):
            self._attempt(f"{path}.guards.{name}", new_guard_key, class_key, name)

        state_actions = section.get("state_actions") or {}
        if not isinstance(state_actions, dict):
            self._issue(f"{path}.state_actions", "MALFORMED_ENTRY", "Expected a mapping of states")
            return
        for state_name, entries in state_actions.items():
            self._load_state_actions(
                f"{path}.state_actions.{state_name}",
                class_key,
                str(state_name),
                entries,
                states,
                actions,
                rejected,
            )

    def _load_state_actions(
        self,
        path: str,
        class_key: Key,
        state_name: str,
        entries: Any,
        states: dict[str, Key],
        actions: dict[str, Key],
        rejected: set[str],
    ) -> None:
        try:
            state = new_state_key(class_key, state_name)
        except KeyFormatError as exc:
            # Already reported under states.
            if state_name not in rejected:
                self._issue(path, exc.code, str(exc))
            return
        if state.name not in states:
            msg = f"State {state.name!r} is not declared on '{class_key}'"
            self._issue(path, "UNKNOWN_STATE", msg)
            return
        if not isinstance(entries, list):
            self._issue(path, "MALFORMED_ENTRY", "Expected a list of {when, action} entries")
            return

        for index, entry in enumerate(entries):
            entry_path = f"{path}[{index}]"
            if not isinstance(entry, dict) or "action" not in entry:
                msg = "Expected a mapping with 'when' and 'action'"
                self._issue(entry_path, "MALFORMED_ENTRY", msg)
                continue
            for name in entry:
                if name not in _STATE_ACTION_FIELDS:
                    self._issue(f"{entry_path}.{name}", "UNKNOWN_FIELD", f"Unknown field {name!r}")
            try:
                action = new_action_key(class_key, str(entry["action"]))
            except KeyFormatError as exc:
                self._issue(entry_path, exc.code, str(exc))
                continue
            if action.name not in actions:
                self._issue(
                    entry_path,
                    "UNKNOWN_ACTION",
                    f"Action {action.name!r} is not declared on '{class_key}'",
                )
                continue
            self._attempt(entry_path, new_state_action_key, state, entry.get("when"), action)
