from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar, Union

from avweather.exceptions import UnsupportedContentType

R = TypeVar('R')


class Decoder(ABC, Generic[R]):
    """
    Base interface for report decoders.

    A decoder turns one fully materialised response body into a list of
    records. Instances keep no state between calls, so one decoder can be
    shared across threads.
    """

    #: MIME type the service uses for this kind of report
    content_type: str = ""

    def decode(self, data: Union[bytes, str], content_type: Optional[str] = None) -> List[R]:
        """
        Decode a response body.

        Args:
            data: Response body
            content_type: Declared content type of the body, if known.
                Parameters such as ``; charset=utf-8`` are ignored.

        Returns:
            Decoded records

        Raises:
            UnsupportedContentType: If ``content_type`` does not match
            AvWeatherError: Any decode failure
        """
        if content_type is not None:
            self.check_content_type(content_type)
        if isinstance(data, str):
            data = data.encode('utf-8')
        return self._decode(data)

    def check_content_type(self, content_type: Optional[str]) -> None:
        """Raise UnsupportedContentType unless the mime type matches."""
        mime = (content_type or "").split(';', 1)[0].strip().lower()
        if mime != self.content_type:
            raise UnsupportedContentType(self.content_type, content_type)

    @abstractmethod
    def _decode(self, data: bytes) -> List[R]:
        """Decode raw bytes into records."""
        pass
