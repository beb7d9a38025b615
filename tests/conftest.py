"""Workspace-level pytest configuration and fixtures.

Provides small Rust crates written to a temporary directory and the
UniFFI-style generated files the post-processor rewrites.
"""

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

COUNTER_SOURCE = """\
use std::sync::Arc;

#[lera::state(samples)]
#[derive(uniffi::Record)]
pub struct CounterState {
    pub count: i64,
}

#[lera::model(state = CounterState)]
pub struct Counter {
    state: CounterState,
}

#[lera::api]
impl Counter {
    #[uniffi::constructor]
    pub fn new(state: CounterState) -> Arc<Self> {
        todo!()
    }

    #[lera::default_params(step = 1, label = "hi")]
    pub fn increment(&self, step: i64, label: String) {
        todo!()
    }

    pub fn reset(&self) {}

    #[lera::default_params(value)]
    pub async fn load(&self, value: Option<u8>) -> Result<i64, CounterError> {
        todo!()
    }

    fn private_helper(&self) {}
}

impl Drop for Counter {
    fn drop(&mut self) {}
}
"""

NAVIGATING_SOURCE = """\
#[lera::state]
pub struct ProfileState {
    pub name: String,
}

#[lera::model(state = ProfileState)]
pub struct Profile {
    state: ProfileState,
}

#[lera::api(navigating)]
impl Profile {
    pub fn show_settings(&self) {}
}
"""

SWIFT_GENERATED = """\
// This file was autogenerated by some hot garbage in the `uniffi` crate.
import Foundation

public protocol CounterStateChangeListener: AnyObject {
    func onStateChange(state: CounterState)
}
"""

KOTLIN_GENERATED = """\
// This file was autogenerated by some hot garbage in the `uniffi` crate.
@file:Suppress("NAME_SHADOWING")

package uniffi.counter

import com.sun.jna.Library

public interface CounterStateChangeListener {
    fun onStateChange(state: CounterState)
}
"""


type CrateWriter = Callable[..., Path]


@pytest.fixture(autouse=True)
def isolate_loggers() -> Generator[None]:
    """Undo logging configuration changes after each test.

    The packaged logging config stops propagation of the package logger,
    which would hide records from caplog in later tests, and binds console
    handlers to streams that CliRunner closes.
    """
    root_logger = logging.getLogger()
    package_logger = logging.getLogger("lera_bindgen")
    root_level = root_logger.level
    root_handlers = root_logger.handlers[:]
    package_level = package_logger.level
    package_handlers = package_logger.handlers[:]

    yield

    root_logger.setLevel(root_level)
    root_logger.handlers[:] = [
        handler
        for handler in root_logger.handlers
        if handler in root_handlers or type(handler).__module__.startswith("_pytest")
    ]
    package_logger.setLevel(package_level)
    package_logger.propagate = True
    package_logger.handlers[:] = package_handlers


@pytest.fixture
def write_crate(tmp_path: Path) -> CrateWriter:
    """Return a factory writing ``{file name: source}`` into ``<crate>/src``."""

    def _write(files: dict[str, str], name: str = "crate") -> Path:
        crate = tmp_path / name
        source_dir = crate / "src"
        source_dir.mkdir(parents=True, exist_ok=True)
        for file_name, source in files.items():
            (source_dir / file_name).write_text(source, encoding="utf-8")
        return crate

    return _write


@pytest.fixture
def counter_crate(write_crate: CrateWriter) -> Path:
    """Crate declaring the Counter model."""
    return write_crate({"lib.rs": COUNTER_SOURCE})


@pytest.fixture
def swift_file(tmp_path: Path) -> Path:
    """UniFFI-style generated Swift file."""
    path = tmp_path / "Counter.swift"
    path.write_text(SWIFT_GENERATED, encoding="utf-8")
    return path


@pytest.fixture
def kotlin_file(tmp_path: Path) -> Path:
    """UniFFI-style generated Kotlin file."""
    path = tmp_path / "counter.kt"
    path.write_text(KOTLIN_GENERATED, encoding="utf-8")
    return path
