"""Scope extraction tests for Go."""

from helpers import ref_names, scope_named


class TestGoScopes:
    def test_method_parented_to_receiver_type(self, extract) -> None:
        """Methods are nested under their receiver type even though declared at file level."""
        analysis = extract(
            "server/server.go",
            """
            package server

            type Server struct {
                Addr string
            }

            func (s *Server) Start(port int) error {
                return s.listen(port)
            }
            """,
        )

        server = scope_named(analysis, "Server")
        start = scope_named(analysis, "Start")
        assert server.type == "class"
        assert start.type == "method"
        assert start.parent == "Server"
        assert start.depth == 1
        assert "pointer_receiver" in start.modifiers
        assert [p.name for p in start.parameters] == ["port"]

    def test_receiver_name_not_referenced(self, extract) -> None:
        analysis = extract(
            "server/server.go",
            """
            package server

            func (s *Server) Stop() {
                s.conn.Close()
                cleanup(s)
            }
            """,
        )

        names = ref_names(scope_named(analysis, "Stop"))
        assert "s" not in names
        assert "cleanup" in names

    def test_interface_and_embedding(self, extract) -> None:
        analysis = extract(
            "io/rw.go",
            """
            package io

            type ReadWriter interface {
                Reader
                Write(p []byte) (int, error)
            }
            """,
        )

        rw = scope_named(analysis, "ReadWriter")
        assert rw.type == "interface"
        assert rw.heritage_clauses[0].types == ("Reader",)

    def test_exported_by_capitalization(self, extract) -> None:
        analysis = extract(
            "util/util.go",
            """
            package util

            func Public() {}

            func private() {}

            const MaxSize = 10
            """,
        )

        assert set(analysis.exports) == {"Public", "MaxSize"}
        assert scope_named(analysis, "MaxSize").type == "constant"


class TestGoImports:
    def test_import_specs(self, extract) -> None:
        analysis = extract(
            "cmd/main.go",
            """
            package main

            import (
                "fmt"
                str "strings"
                _ "net/http/pprof"
                "github.com/acme/tool/v2"
            )
            """,
        )

        by_source = {i.source: i for i in analysis.import_references}
        assert by_source["fmt"].imported == "fmt"
        assert by_source["strings"].alias == "str"
        assert by_source["net/http/pprof"].kind == "side-effect"
        assert by_source["github.com/acme/tool/v2"].imported == "tool"
        assert "github.com/acme/tool" in analysis.dependencies
