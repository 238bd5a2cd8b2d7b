from __future__ import annotations

import codecs
import json
import logging
import typing as tp
import xml.etree.ElementTree as ET
from urllib.parse import parse_qs

import yaml

if tp.TYPE_CHECKING:
    from verdict._core.models import Response

logger = logging.getLogger("verdict.translators")

__all__ = (
    "Translator",
    "BaseTranslator",
    "JSONTranslator",
    "XMLTranslator",
    "YAMLTranslator",
    "FormTranslator",
    "TranslatorRegistry",
    "default_registry",
)

DEFAULT_CHARSET = "utf-8"


def media_type(content_type: tp.Optional[str]) -> str:
    """
    Return the bare media type of a Content-Type value.

    Examples:
        >>> media_type("Application/JSON; charset=utf-8")
        'application/json'
    """
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def charset(content_type: tp.Optional[str]) -> str:
    """
    Return the charset parameter of a Content-Type value.

    Unknown or missing charsets fall back to utf-8.
    """
    if content_type:
        for parameter in content_type.split(";")[1:]:
            name, _, value = parameter.partition("=")
            if name.strip().lower() == "charset" and value.strip():
                encoding = value.strip().strip('"')
                try:
                    codecs.lookup(encoding)
                except LookupError:
                    logger.debug(f"Unknown charset {encoding!r}, decoding the body as {DEFAULT_CHARSET}.")
                    return DEFAULT_CHARSET
                return encoding
    return DEFAULT_CHARSET


class Translator(tp.Protocol):
    def deserialise(self, response: Response, options: tp.Mapping[str, tp.Any]) -> tp.Any: ...


class BaseTranslator:
    media_types: tp.Tuple[str, ...] = ()

    def deserialise(self, response: Response, options: tp.Mapping[str, tp.Any]) -> tp.Any:
        raise NotImplementedError()


class JSONTranslator(BaseTranslator):
    """
    A json-based translator.

    Options are forwarded to `json.loads`, e.g. `{"parse_float": Decimal}`.
    """

    media_types = ("application/json", "text/javascript")

    def deserialise(self, response: Response, options: tp.Mapping[str, tp.Any]) -> tp.Any:
        return json.loads(response.text, **options)


class XMLTranslator(BaseTranslator):
    """
    An xml-based translator producing nested dictionaries.

    The document `<menu id="1"><item>a</item><item>b</item></menu>` becomes
    `{"menu": {"@id": "1", "item": ["a", "b"]}}`. Repeated children turn
    into lists and leaf elements collapse to their text. The attribute
    prefix can be changed with the `attribute_prefix` option.
    """

    media_types = ("application/xml", "text/xml")

    def deserialise(self, response: Response, options: tp.Mapping[str, tp.Any]) -> tp.Any:
        root = ET.fromstring(response.body)
        prefix = options.get("attribute_prefix", "@")
        return {root.tag: self._element_to_value(root, prefix)}

    def _element_to_value(self, element: ET.Element, prefix: str) -> tp.Any:
        children = list(element)
        text = (element.text or "").strip()

        if not children and not element.attrib:
            return text or None

        value: tp.Dict[str, tp.Any] = {f"{prefix}{name}": attr for name, attr in element.attrib.items()}
        for child in children:
            child_value = self._element_to_value(child, prefix)
            if child.tag not in value:
                value[child.tag] = child_value
            elif isinstance(value[child.tag], list):
                value[child.tag].append(child_value)
            else:
                value[child.tag] = [value[child.tag], child_value]

        if text:
            value["#text"] = text
        return value


class YAMLTranslator(BaseTranslator):
    """A yaml-based translator. Only the safe subset of YAML is loaded."""

    media_types = ("application/x-yaml", "application/yaml", "text/yaml")

    def deserialise(self, response: Response, options: tp.Mapping[str, tp.Any]) -> tp.Any:
        return yaml.safe_load(response.text)


class FormTranslator(BaseTranslator):
    """
    Translator for `application/x-www-form-urlencoded` bodies.

    Keys that occur once map to a string, repeated keys map to a list.
    Pass `{"keep_blank_values": True}` to keep empty values.
    """

    media_types = ("application/x-www-form-urlencoded",)

    def deserialise(self, response: Response, options: tp.Mapping[str, tp.Any]) -> tp.Any:
        parsed = parse_qs(response.text, keep_blank_values=bool(options.get("keep_blank_values", False)))
        return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


class TranslatorRegistry:
    """
    Maps media types to translators.

    Content types are matched on their bare media type, so
    `application/json; charset=utf-8` finds the `application/json` translator.
    """

    def __init__(self, translators: tp.Optional[tp.Mapping[str, Translator]] = None) -> None:
        self._translators: tp.Dict[str, Translator] = {}
        for content_type, translator in (translators or {}).items():
            self.register(content_type, translator)

    def register(self, content_type: str, translator: Translator) -> None:
        self._translators[media_type(content_type)] = translator

    def lookup(self, content_type: tp.Optional[str]) -> tp.Optional[Translator]:
        translator = self._translators.get(media_type(content_type))
        if translator is None:
            logger.debug(f"No translator is registered for the content type {content_type!r}.")
        return translator

    def __contains__(self, content_type: object) -> bool:
        return isinstance(content_type, str) and media_type(content_type) in self._translators

    def __len__(self) -> int:
        return len(self._translators)


def default_registry() -> TranslatorRegistry:
    registry = TranslatorRegistry()
    for translator in (JSONTranslator(), XMLTranslator(), YAMLTranslator(), FormTranslator()):
        for content_type in translator.media_types:
            registry.register(content_type, translator)
    return registry
