"""
XML event plumbing for the METAR and TAF decoders.

A SAX parse is turned into a closed set of events (``ElementStart``,
``ElementEnd``, ``Text``) that are fed one at a time to a state machine via
``XmlStateMachine.dispatch``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Union
from xml.sax import SAXParseException
from xml.sax.handler import ContentHandler

import defusedxml.sax
from defusedxml import DefusedXmlException

from avweather.exceptions import InvalidStationQuery, MalformedDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementStart:
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ElementEnd:
    name: str


@dataclass(frozen=True)
class Text:
    fragment: str


Event = Union[ElementStart, ElementEnd, Text]


class XmlStateMachine(ABC):
    """
    Base class for the report state machines.

    Keeps the character buffer for the element being read and handles the
    ``data`` element that carries the result count. Subclasses implement
    ``element_start`` and ``element_end``; the buffer is cleared before every
    start and after every end, so at an element end it holds exactly the text
    of that element.
    """

    #: Report kind used in error messages (e.g. "METAR")
    report_kind = ""

    def __init__(self):
        self.buffer = ""

    def dispatch(self, event: Event) -> None:
        """Feed one event to the state machine."""
        if isinstance(event, ElementStart):
            self.buffer = ""
            if event.name == 'data':
                self.check_result_count(event.attributes)
            else:
                self.element_start(event.name, event.attributes)
        elif isinstance(event, ElementEnd):
            self.element_end(event.name)
            self.buffer = ""
        else:
            self.buffer += event.fragment

    def check_result_count(self, attributes: Dict[str, str]) -> None:
        """
        Validate the ``num_results`` attribute of the ``data`` element.

        The service answers an unknown station with zero results rather than
        an error, so zero is reported as InvalidStationQuery.
        """
        count = attributes.get('num_results', '').strip()
        if not count.isdigit():
            raise MalformedDocument(f"Failed to parse {self.report_kind} XML.")
        if int(count) == 0:
            raise InvalidStationQuery()

    @abstractmethod
    def element_start(self, name: str, attributes: Dict[str, str]) -> None:
        pass

    @abstractmethod
    def element_end(self, name: str) -> None:
        pass


class _EventForwarder(ContentHandler):
    """Translate SAX callbacks into events for a state machine."""

    def __init__(self, machine: XmlStateMachine):
        super().__init__()
        self._machine = machine

    def startElement(self, name, attrs):
        self._machine.dispatch(ElementStart(name, {k: attrs[k] for k in attrs.keys()}))

    def endElement(self, name):
        self._machine.dispatch(ElementEnd(name))

    def characters(self, content):
        self._machine.dispatch(Text(content))


def run_xml(data: bytes, machine: XmlStateMachine) -> None:
    """
    Parse ``data`` and drive ``machine`` with the resulting events.

    Raises:
        MalformedDocument: If the XML is not well-formed or uses forbidden
            constructs (entity declarations, external references)
        AvWeatherError: Whatever the state machine raises
    """
    try:
        defusedxml.sax.parseString(data, _EventForwarder(machine))
    except SAXParseException as e:
        logger.debug("XML parse failed: %s", e)
        raise MalformedDocument(f"Failed to parse {machine.report_kind} XML: {e}") from e
    except DefusedXmlException as e:
        raise MalformedDocument(f"Refused {machine.report_kind} XML: {e}") from e
