"""Shared fixtures: a miniature TypeScript lib, a node_modules tree and a local module."""

import json
from pathlib import Path

import pytest

MINI_LIB_ES5 = '''/// <reference no-default-lib="true"/>

declare var NaN: number;

/**
 * Converts a string to an integer.
 * @param string A string to convert into a number.
 * @param radix A value between 2 and 36 that specifies the base of the number in `string`.
 */
declare function parseInt(string: string, radix?: number): number;

interface Object {
    /** Returns a string representation of an object. */
    toString(): string;
}

interface Function {
    apply(this: Function, thisArg: any, argArray?: any): any;
}

interface String {
    /** Returns the length of a String object. */
    readonly length: number;
    /**
     * Returns the character at the specified index.
     * @param pos The zero-based index of the desired character.
     */
    charAt(pos: number): string;
    /**
     * Gets a substring beginning at the specified location and having the specified length.
     * @deprecated A legacy feature for browser compatibility
     * @param from The starting position of the desired substring.
     * @param length The number of characters to include in the returned substring.
     */
    substr(from: number, length?: number): string;
}

interface StringConstructor {
    new (value?: any): String;
    (value?: any): string;
    readonly prototype: String;
    fromCharCode(...codes: number[]): string;
}

/**
 * Allows manipulation and formatting of text strings.
 */
declare var String: StringConstructor;

interface Number {
    /**
     * Returns a string representing a number in fixed-point notation.
     * @param fractionDigits Number of digits after the decimal point.
     */
    toFixed(fractionDigits?: number): string;
}

interface Boolean {
    valueOf(): boolean;
}

interface Array<T> {
    /** Gets or sets the length of the array. */
    length: number;
    /**
     * Calls a defined callback function on each element of an array, and returns an array that contains the results.
     * @param callbackfn A function that accepts up to three arguments.
     * @param thisArg An object to which the this keyword can refer in the callbackfn function.
     */
    map<U>(callbackfn: (value: T, index: number, array: T[]) => U, thisArg?: any): U[];
    /**
     * Adds all the elements of an array into a string, separated by the specified separator string.
     * @param separator A string used to separate one element of the array from the next.
     */
    join(separator?: string): string;
}

interface ArrayConstructor {
    new (arrayLength?: number): any[];
    new <T>(...items: T[]): T[];
    (arrayLength?: number): any[];
    isArray(arg: any): arg is any[];
    readonly prototype: any[];
}

declare var Array: ArrayConstructor;

/**
 * Marks all properties optional.
 */
type Partial<T> = {
    [P in keyof T]?: T[P];
};

declare namespace Intl {
    interface CollatorOptions {
        usage?: string;
    }
    interface Collator {
        /** Compares two strings. */
        compare(x: string, y: string): number;
    }
    var Collator: {
        new (locales?: string, options?: CollatorOptions): Collator;
    };
}
'''

MINI_LIB_PROMISE = '''interface PromiseLike<T> {
    then<TResult1 = T>(onfulfilled?: ((value: T) => TResult1) | null): PromiseLike<TResult1>;
}

/**
 * Represents the completion of an asynchronous operation
 */
interface Promise<T> {
    /**
     * Attaches callbacks for the resolution of the Promise.
     * @param onfulfilled The callback to execute when the Promise is resolved.
     * @returns A Promise for the completion of the callback.
     */
    then<TResult1 = T>(onfulfilled?: ((value: T) => TResult1) | null): Promise<TResult1>;
}

interface PromiseConstructor {
    readonly prototype: Promise<any>;
    /**
     * Creates a new Promise.
     * @param executor A callback used to initialize the promise.
     */
    new <T>(executor: (resolve: (value: T) => void, reject: (reason?: any) => void) => void): Promise<T>;
    /**
     * Creates a Promise that is resolved with an array of results when all of the provided Promises resolve.
     * @param values An array of Promises.
     * @returns A new Promise.
     */
    all<T>(values: Iterable<T | PromiseLike<T>>): Promise<T[]>;
    /**
     * Creates a new resolved promise.
     * @since 2015
     */
    resolve(): Promise<void>;
}

declare var Promise: PromiseConstructor;
'''

EXAMPLE_TS = '''/**
 * A simple greeting function that says hello
 * @param name The name of the person to greet
 * @returns A greeting message
 * @example
 * ```ts
 * greet("Alice") // Returns "Hello, Alice!"
 * ```
 */
export function greet(name: string): string {
    return `Hello, ${name}!`;
}

/**
 * A person interface representing basic user data
 */
export interface Person {
    /** The person's full name */
    name: string;
    /** The person's age in years */
    age: number;
    /** Optional email address */
    email?: string;
}

/**
 * Calculate the sum of two numbers
 * @param a First number
 * @param b Second number
 * @returns The sum of a and b
 */
export const add = (a: number, b: number): number => a + b;

/**
 * A configuration type
 */
export type Config = {
    /** Enable debug mode */
    debug: boolean;
    /** Port number */
    port: number;
};
'''

FAKEPKG_INDEX = '''import { Options } from "./options";
export { Options };
export * from "./helpers";

/**
 * Create a new server instance.
 * @param options Server options.
 * @returns The server.
 */
export declare function createServer(options?: Options): Server;

/** A running server. */
export declare class Server {
    /** Create a server listening on a port. */
    constructor(port: number);
    /** Port the server listens on. */
    readonly port: number;
    /** Start listening. */
    listen(callback?: () => void): this;
    /** Live server count. */
    static instances: number;
}

/**
 * Incoming request.
 * @since 2.0.0
 * @internal
 */
export interface Request {
    /** Request path. */
    path: string;
    /** Parsed query string. */
    query?: Record<string, string>;
}
'''

FAKEPKG_OPTIONS = '''export interface Options {
    /** Port to listen on. */
    port?: number;
    host?: string;
}
'''

FAKEPKG_HELPERS = '''/**
 * Start a server the old way.
 * @deprecated Use createServer instead
 */
export declare function legacyServer(): void;
'''

LEGACY_TYPES = '''declare namespace legacy {
    /** Legacy version string. */
    const version: string;
    function run(task: string): Promise<void>;
}
export = legacy;
'''

PLAINPKG_INDEX = '''/** The answer. */
export declare const answer: number;
'''


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def ts_lib(tmp_path) -> Path:
    """Directory holding a miniature lib.es5.d.ts and lib.es2015.promise.d.ts."""
    lib = tmp_path / "typescript" / "lib"
    write(lib / "lib.es5.d.ts", MINI_LIB_ES5)
    write(lib / "lib.es2015.promise.d.ts", MINI_LIB_PROMISE)
    write(lib / "typescript.d.ts", "declare namespace ts { const version: string; }\n")
    return lib


@pytest.fixture
def project(tmp_path) -> Path:
    """A project with example.ts and a node_modules tree."""
    root = tmp_path / "project"
    write(root / "example.ts", EXAMPLE_TS)

    fakepkg = root / "node_modules" / "fakepkg"
    write(fakepkg / "package.json", json.dumps({"name": "fakepkg", "types": "types/index.d.ts"}))
    write(fakepkg / "types" / "index.d.ts", FAKEPKG_INDEX)
    write(fakepkg / "types" / "options.d.ts", FAKEPKG_OPTIONS)
    write(fakepkg / "types" / "helpers.d.ts", FAKEPKG_HELPERS)

    write(root / "node_modules" / "legacy" / "package.json", json.dumps({"name": "legacy"}))
    write(root / "node_modules" / "@types" / "legacy" / "index.d.ts", LEGACY_TYPES)

    write(root / "node_modules" / "plainpkg" / "package.json", json.dumps({"name": "plainpkg"}))
    write(root / "node_modules" / "plainpkg" / "index.d.ts", PLAINPKG_INDEX)
    return root


@pytest.fixture
def config(project, ts_lib, monkeypatch):
    """Config pointing at the miniature lib, rooted in the project."""
    from tsdoc.config import TsdocConfig

    monkeypatch.delenv("TSDOC_TYPESCRIPT_LIB", raising=False)
    monkeypatch.delenv("TSDOC_CONFIG", raising=False)
    return TsdocConfig(
        typescript_lib=str(ts_lib),
        include_node_types=False,
        npm_global=False,
        cwd=str(project),
    )


@pytest.fixture
def stdlib(config):
    """(universe, checker) over the miniature standard library."""
    from tsdoc.checker import build_program
    from tsdoc.universe import load_universe

    universe = load_universe(config)
    return universe, build_program(universe)


@pytest.fixture
def cli_env(project, ts_lib, monkeypatch):
    """Run the CLI from inside the project with a tsdoc.json config."""
    monkeypatch.delenv("TSDOC_TYPESCRIPT_LIB", raising=False)
    monkeypatch.delenv("TSDOC_CONFIG", raising=False)
    write(project / "tsdoc.json", json.dumps({
        "typescript_lib": str(ts_lib),
        "include_node_types": False,
        "npm_global": False,
    }))
    monkeypatch.chdir(project)
    return project
