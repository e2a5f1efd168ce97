"""Decoders for the AWC METAR/TAF XML and SIGMET GeoJSON payloads."""

from avweather.decoders.base import Decoder
from avweather.decoders.events import ElementStart, ElementEnd, Text, Event, XmlStateMachine
from avweather.decoders.metar import MetarDecoder
from avweather.decoders.taf import TafDecoder
from avweather.decoders.sigmet import SigmetDecoder

__all__ = [
    'Decoder',
    'MetarDecoder',
    'TafDecoder',
    'SigmetDecoder',
    'ElementStart',
    'ElementEnd',
    'Text',
    'Event',
    'XmlStateMachine',
]
