import pytest

from dirtsim.dirtutils import make_stemmer, write_records


#
# Run a job with the inline runner and return its parsed output records.
#
def run_inline(job_class, args, inputs, reducers=1):
    argv = ["-r", "inline", "--no-conf",
            "--jobconf", "mapreduce.job.reduces=%d" % reducers] + \
           list(args) + [str(path) for path in inputs]
    job = job_class(argv)
    with job.make_runner() as runner:
        runner.run()
        return list(job.parse_output(runner.cat_output()))


@pytest.fixture
def stem():
    return make_stemmer()


@pytest.fixture
def write_lines(tmp_path):
    def write(name, lines):
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines),
                        encoding="utf-8")
        return str(path)
    return write


@pytest.fixture
def write_side(tmp_path):
    def write(name, records):
        path = str(tmp_path / name)
        write_records(path, records)
        return path
    return write


@pytest.fixture
def pair_files(write_lines):
    def write(positive, negative):
        return write_lines("positive.txt", positive), \
               write_lines("negative.txt", negative)
    return write
