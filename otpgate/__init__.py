"""otpgate - OTP-gated user registration with stateless signed pending tokens."""

__version__ = "0.1.0"
