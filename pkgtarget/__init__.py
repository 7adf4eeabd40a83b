"""pkgtarget — platform target resolution for package installers."""

__version__ = "0.1.0"
