# csvforge

A small toolkit for working with CSV and TSV files from the command line or
from Python. It has no dependencies beyond the standard library.

## Installation

```
pip install .
```

This installs the `csvforge` command.

## Commands

| Command | What it does |
| --- | --- |
| `headers` | print the column names of each file, one per line (`-v` numbers them and prints the file name) |
| `head` | print the header and the first N records (`-n`, default 10) |
| `ncol` (`ncols`) | print the number of columns of each file (`-n` adds the file name) |
| `nrow` (`nrows`) | print the number of data records of each file (`-n` adds the file name) |
| `grep` | keep records whose selected fields match patterns or regular expressions |
| `inter` | intersection of several files on key columns |
| `join` (`merge`) | inner, left (`-L`/`-k`) and outer (`-O`) join on key columns |
| `mutate` | append a column holding the first capture group of a regular expression |
| `rename` | give the selected columns new names (`-n a,b,c`) |
| `rename2` | rename columns by regular expression, with `{nr}` and `{kv}` substitutions |
| `pretty` | render a file as an aligned text table |

Examples:

```
csvforge head -n 5 data.csv
csvforge grep -f id -p A1 -p B2 data.csv
csvforge grep -f name -r -i -p "^a" data.csv
csvforge join -f id a.csv b.csv
csvforge join -O --na NA -f "id;key" a.csv b.csv
csvforge mutate -f file -p "^(.+)\.txt$" -n base data.csv
csvforge rename2 -f 2-4 -p "(.+)" -r "col{nr}_\$1" data.csv
csvforge pretty data.csv
```

`csvforge <command> -h` lists a command's options.

### Global options

Every command accepts these after the command name:

- `-t/--tabs` read tab-separated input; `-d/--delimiter` sets another input delimiter
- `-T/--out-tabs` write tab-separated output; `-D/--out-delimiter` sets another
- `-H/--no-header-row` the input has no header row
- `-C/--comment-char` lines starting with this character are skipped (default `#`)
- `-l/--lazy-quotes` tolerate stray quotes
- `-E/--ignore-empty-row` and `-I/--ignore-illegal-row` skip empty rows or rows
  with the wrong number of columns, with a warning
- `-o/--out-file` write to a file instead of standard output
- `-X/--infile-list` read input file names from a file, one per line
- `-c/--chunk-size` and `-j/--num-cpus` are validated settings of the configuration

The environment variables `CSVFORGE_T` and `CSVFORGE_H` override `--tabs` and
`--no-header-row` when set (`""`, `0` and `false` mean off).

Input compressed with gzip, bzip2 or xz is read transparently, and output
files ending in `.gz`, `.bz2` or `.xz` are compressed. A leading `sep=X` line
sets the input delimiter and is echoed to the output.

### Selecting fields

Fields can be given:

- as numbers, e.g. `-f 1,3`
- as ranges, e.g. `-f 2-4`
- as column names, e.g. `-f id,name`
- as wildcard patterns with `-F`, e.g. `-F -f "*name"` (in `grep`, `inter`,
  `join`, `rename` and `rename2`)

A leading `-` excludes a field instead of selecting it, e.g. `--fields=-2`.
Numbers and names cannot be mixed, nor selections with exclusions.

## From Python

Each command is also a function taking a `Config`, the input file or files,
the command's options and an optional output stream:

```python
import sys
from csvforge.config import Config
from csvforge.head import head
from csvforge.join import JoinOptions, join

head(Config(), ["data.csv"], 5, sys.stdout)
rows = join(Config(), ["a.csv", "b.csv"], JoinOptions(fields="id", left_join=True))
```

- `csvforge.grep.grep` with `GrepOptions`, `csvforge.head.head`,
  `csvforge.headers.headers`, `csvforge.counts.count_columns` and `count_rows`
- `csvforge.inter.intersect`, `csvforge.join.join` with `JoinOptions`
- `csvforge.mutate.mutate`, `csvforge.rename.rename`,
  `csvforge.rename2.rename2` with `Rename2Options`
- `csvforge.pretty.pretty` and `format_table`
- `csvforge.fields.parse_fields`, `FieldSelector` and `parse_csv_file` for
  field selection; `csvforge.csvio.CSVReader`, `read_csv` and
  `read_data_frame` for reading

Errors raise `csvforge.config.CsvtkError`; the command prints them and exits
with status 1.

## What it does not do

There is no plotting (histograms, line or scatter plots), and no command that
computes a new column from arithmetic or string expressions; `mutate` only
extracts text by regular expression. Sorting, cutting, concatenating and
other reshaping operations are not provided.