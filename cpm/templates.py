"""Text templates written by init, add-rust and the standalone bundler."""
from __future__ import annotations

from .core.env import PROG, STANDALONE_CRATE

# Host program for standalone bundles. The bundler stages the entry script
# next to this file as app.js so include_str! picks it up at compile time.
STANDALONE_TEMPLATE = """\
use jetcrab::JetCrabRuntime;

#[tokio::main]
async fn main() -> Result<(), Box<dyn std::error::Error>> {
    let mut runtime = JetCrabRuntime::new();

    // The JavaScript code is injected here by cpm build
    let app_code = include_str!("app.js");

    runtime.evaluate_code(app_code).await?;

    Ok(())
}
"""

CARGO_TOML_TEMPLATE = """\
[package]
name = "{crate}"
version = "0.1.0"
edition = "2021"

[dependencies]
jetcrab = {{ path = "{runtime_path}" }}
tokio = {{ version = "1.0", features = ["full"] }}

[workspace]
"""

INDEX_JS = """\
// CPM JavaScript Project
console.log('Hello from CPM! 🦀');

// Example function
function greet(name) {
    console.log(`Hello, ${name}! Welcome to CPM.`);
}

// Call the function
greet('World');
"""

README_TEMPLATE = """\
# {name} - CPM JavaScript Project

This is a JavaScript project managed by CPM (Crab Package Manager).

## Getting Started

1. **Install dependencies:**
   ```bash
   {prog} install
   ```

2. **Start development server:**
   ```bash
   {prog} dev
   ```

3. **Build the project:**
   ```bash
   {prog} build
   ```

## Adding Rust (Optional)

To add Rust to this project later:
```bash
{prog} add-rust
```

## Available Commands

- `{prog} install` - Install dependencies
- `{prog} add <package>` - Add a package
- `{prog} remove <package>` - Remove a package
- `{prog} build` - Build the project
- `{prog} dev` - Start development server
- `{prog} test` - Run tests
- `{prog} add-rust` - Add Rust to the project
- `{prog} rust-status` - Check Rust status
"""

LIB_RS = """\
use wasm_bindgen::prelude::*;

// Import console.log from web-sys
use web_sys::console;

// A macro to provide `println!(..)`-style syntax for `console.log` logging.
macro_rules! log {
    ( $( $t:tt )* ) => {
        console::log_1(&format!( $( $t )* ).into());
    }
}

#[wasm_bindgen]
extern "C" {
    fn alert(s: &str);
}

#[wasm_bindgen]
pub fn greet(name: &str) {
    alert(&format!("Hello, {}! You've been greeted from Rust!", name));
}

#[wasm_bindgen]
pub fn add(a: i32, b: i32) -> i32 {
    log!("Adding {} + {}", a, b);
    a + b
}

#[wasm_bindgen]
pub fn fibonacci(n: i32) -> i32 {
    if n <= 1 {
        n
    } else {
        fibonacci(n - 1) + fibonacci(n - 2)
    }
}

#[wasm_bindgen]
pub fn get_rust_version() -> String {
    env!("CARGO_PKG_VERSION").to_string()
}
"""

# Scripts init adds to package.json
PROJECT_SCRIPTS = {
    "dev": f"{PROG} dev",
    "build": f"{PROG} build",
    "test": f"{PROG} test",
}

# Crates add-rust merges into Cargo.toml [dependencies]
WASM_CRATES = {
    "wasm-bindgen": "0.2",
    "serde": "1.0",
    "serde-wasm-bindgen": "0.6",
    "web-sys": "0.3",
}

WASM_NPM_PACKAGE = ("wasm-bindgen", "^0.2")


def render_readme(name: str) -> str:
    return README_TEMPLATE.format(name=name, prog=PROG)


def render_standalone_manifest(runtime_path: str, crate: str = STANDALONE_CRATE) -> str:
    return CARGO_TOML_TEMPLATE.format(crate=crate, runtime_path=runtime_path)
