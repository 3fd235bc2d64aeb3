[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "locklab"
version = "0.1.0"
description = "Mutexes, semaphores and bounded queues for measuring how lock design affects multi-threaded workloads"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "mutex",
    "semaphore",
    "futex",
    "spinlock",
    "concurrency",
    "benchmark",
    "bounded queue",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
locklab-queue = "locklab.queue_bench:main"
locklab-queue-isa = "locklab.queue_bench:isa_main"
locklab-counter = "locklab.counter_bench:main"

[tool.hatch.build.targets.wheel]
packages = ["locklab"]

[tool.pytest.ini_options]
addopts = "-ra"
