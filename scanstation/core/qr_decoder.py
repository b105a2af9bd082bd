# scanstation/core/qr_decoder.py
"""Optical decoding of QR codes and barcodes from camera frames."""
import logging

from pyzbar.pyzbar import decode

class QRDecoder:
    def __init__(self, encoding="utf-8"):
        self.logger = logging.getLogger(__name__)
        self.encoding = encoding

    def decode(self, frame):
        """
        Decode the first symbol found in ``frame``.

        Returns:
            tuple: (text, found). A frame without a symbol is the common case
            and yields ("", False).
        """
        for symbol in decode(frame):
            try:
                text = symbol.data.decode(self.encoding)
            except UnicodeDecodeError as e:
                self.logger.warning(f"Skipping undecodable {symbol.type} payload: {e}")
                continue
            self.logger.debug(f"Decoded {symbol.type}: {text}")
            return text, True
        return "", False
