"""Smart-bin QR fixture generator.

Builds plaintext REGISTER and AES-CBC encrypted SCAN payloads for simulated
devices so a scanning app can be exercised without hardware.
"""

__version__ = "0.2.0"
