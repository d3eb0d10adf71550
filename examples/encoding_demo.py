"""
Example job using typed_spark for typed datasets.

Demonstrates:
  - Opening a scoped session from a mapping of options
  - Building datasets from dataclasses and enums
  - Typed map/filter and a broadcast lookup

Run with PySpark installed, or with spark-submit.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum

from typed_spark import SparkLogLevel, with_spark
from typed_spark.logging_config import configure_typed_spark_logging


class Genre(Enum):
    COMEDY = "comedy"
    HORROR = "horror"
    ROMANCE = "romance"


@dataclass
class Movie:
    id: int
    genres: list[Genre]


def main() -> None:
    configure_typed_spark_logging(level=logging.INFO)

    master = os.environ.get("SPARK_MASTER_URL")
    with with_spark(
        props={"spark.sql.shuffle.partitions": 4, "spark.ui.enabled": False},
        master=master,
        app_name="typed_spark_example",
        log_level=SparkLogLevel.WARN,
    ) as s:
        movies = s.ds_of(
            Movie(1, [Genre.COMEDY, Genre.ROMANCE]),
            Movie(2, [Genre.HORROR]),
        )
        movies.df.printSchema()
        movies.show(truncate=False)

        titles = s.broadcast({1: "Love Actually", 2: "Alien"})
        comedies = (
            movies.filter(lambda m: Genre.COMEDY in m.genres)
            .map(lambda m: titles.value[m.id], str)
            .collect()
        )
        print(f"Comedies: {comedies}")


if __name__ == "__main__":
    main()
