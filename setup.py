"""
libotp setup script
"""
#=============================================================================
# init script env -- ensure cwd = root of source dir
#=============================================================================
import os
root_dir = os.path.abspath(os.path.join(__file__, ".."))
os.chdir(root_dir)

#=============================================================================
# imports
#=============================================================================
import re

from setuptools import setup, find_packages

#=============================================================================
# version string
#=============================================================================

# NOTE: read libotp/__init__.py rather than importing it,
#       since importing needs the runtime dependencies installed.
with open(os.path.join(root_dir, "libotp", "__init__.py"), encoding="utf-8") as fh:
    version = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.M).group(1)

#=============================================================================
# static text
#=============================================================================
SUMMARY = "HOTP / TOTP one-time password derivation for second-factor authentication"

DESCRIPTION = """\
libotp derives short-lived numeric one-time passwords from a shared secret
and the current time (RFC 4226 HOTP / RFC 6238 TOTP), decodes base32 and
base64 encoded secrets, and hands generated tokens to pluggable notification
and event collaborators.
"""

KEYWORDS = """\
otp hotp totp 2fa mfa rfc4226 rfc6238 hmac
"""

CLASSIFIERS = """\
Intended Audience :: Developers
License :: OSI Approved :: BSD License
Natural Language :: English
Operating System :: OS Independent
Programming Language :: Python :: 3
Programming Language :: Python :: 3 :: Only
Programming Language :: Python :: Implementation :: CPython
Topic :: Security :: Cryptography
Topic :: Software Development :: Libraries
""".splitlines()

if '.dev' in version:
    CLASSIFIERS.append("Development Status :: 3 - Alpha")
else:
    CLASSIFIERS.append("Development Status :: 5 - Production/Stable")

#=============================================================================
# run setup
#=============================================================================
setup(
    # package info
    packages=find_packages(root_dir, include=["libotp", "libotp.*"]),
    zip_safe=True,
    python_requires=">=3.9",

    # metadata
    name="libotp",
    version=version,
    license="BSD",

    description=SUMMARY,
    long_description=DESCRIPTION,
    keywords=KEYWORDS,
    classifiers=CLASSIFIERS,

    install_requires=[
        "cryptography>=41",
        "typing_extensions>=4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "pytest-archon>=0.0.6",
        ],
    },
)

#=============================================================================
# eof
#=============================================================================
